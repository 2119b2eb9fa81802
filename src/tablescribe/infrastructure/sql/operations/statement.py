from dataclasses import dataclass, field
from typing import Any, Dict, List, Union

Params = Union[List[Any], Dict[str, Any], List[Dict[str, Any]]]


@dataclass
class Statement:
    """A composed SQL statement and its bound parameters.

    ``params`` is a list of positional values for ``?`` statements, a dict
    for a single named statement, or a list of dicts when ``multiple`` is set
    and the statement is executed once per parameter set.
    """

    sql: str
    params: Params = field(default_factory=list)
    multiple: bool = False
