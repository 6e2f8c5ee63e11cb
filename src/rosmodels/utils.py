import rich.console
import rich.syntax
import rich.tree
import yaml
from beartype import beartype

from rosmodels.logging import configure_logging

__all__ = [
    "print_config_tree",
    "str_to_bool",
]

logger = configure_logging(__name__)


@beartype
def print_config_tree(
    config: dict,
    name: str = "",
    theme: str = "nord-darker",
    max_width: int = 148,
):
    config_yaml = yaml.dump(config, default_flow_style=False)
    tree = rich.tree.Tree(name, style="dim", guide_style="dim")
    tree.add(rich.syntax.Syntax(config_yaml, "yaml", theme=theme))

    console = rich.console.Console(width=max_width)
    console.print(tree)


@beartype
def str_to_bool(value: str | bool, default: bool = False) -> bool:
    """
    Convert strings that could be interpreted as booleans to a boolean value,
    with a default fallback.

    Args:
        value (str | bool): input string or boolean value.
        default (bool, optional): Defaults to False.

    Returns:
        bool: boolean interpretation of the input string

    Examples:
        >>> str_to_bool("yes")
        True
        >>> str_to_bool("0")
        False
        >>> str_to_bool("maybe", default=True)
        True
    """
    if isinstance(value, bool):
        return value
    if value.lower() in ("true", "t", "1", "yes", "y"):
        return True
    elif value.lower() in ("false", "f", "0", "no", "n"):
        return False
    else:
        return default
