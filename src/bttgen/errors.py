"""Exceptions raised by bttgen."""


class BttgenError(Exception):
    """Base class for all bttgen errors."""


class ConfigError(BttgenError):
    """foundry.toml or remappings could not be read."""


class ProjectNotFoundError(BttgenError):
    def __init__(self, start):
        super().__init__(f"Could not find foundry.toml in {start} or any parent directory")
        self.start = start


class ContractNotFoundError(BttgenError):
    def __init__(self, contract_name: str):
        super().__init__(f"Contract '{contract_name}' not found")
        self.contract_name = contract_name


class FunctionNotFoundError(BttgenError):
    def __init__(self, function_name: str, contract_name: str):
        super().__init__(f"Function '{function_name}' not found in contract '{contract_name}'")
        self.function_name = function_name
        self.contract_name = contract_name


class AstLoadError(BttgenError):
    """Sources could not be compiled or an AST file could not be read."""


class TreeBuildError(BttgenError):
    """A branch point handed to the tree builder is malformed."""
