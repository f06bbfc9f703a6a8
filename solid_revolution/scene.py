"""
Scene files: the user's intent for one solid as JSON.

Two layouts are accepted. The piecewise form:

    {
        "upper": [{"formula": "sqrt(x)", "domain_start": "0", "domain_end": "4"}],
        "lower": [{"formula": "0"}],
        "a": "0", "b": "4", "angle": 360
    }

and the single-formula shorthand with one unbounded piece per group:

    {"f": "x^2", "g": "0", "a": "0", "b": "2", "angle": 270}

Bounds may be numbers or formula text; both are kept as given and only
evaluated when a revolution is built.
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from solid_revolution.config import DEFAULT_ANGLE_DEG, GROUP_LOWER, GROUP_UPPER
from solid_revolution.envelope import CurveGroup, CurvePiece

logger = logging.getLogger(__name__)

Bound = Union[str, float, int]


class SceneError(ValueError):
    """Raised when a scene file cannot be read or has a bad structure."""


@dataclass(frozen=True)
class SceneSpec:
    """Curve groups, rotation bounds and angle for one solid.

    Attributes:
        upper: Upper curve group
        lower: Lower curve group
        a: Left bound (number or formula)
        b: Right bound (number or formula)
        angle: Revolution angle in degrees
        name: Optional label used for output file names
    """
    upper: CurveGroup = field(default_factory=lambda: CurveGroup.single(GROUP_UPPER, "x"))
    lower: CurveGroup = field(default_factory=lambda: CurveGroup.single(GROUP_LOWER, "0"))
    a: Bound = 0
    b: Bound = 1
    angle: float = DEFAULT_ANGLE_DEG
    name: str = ""

    @classmethod
    def from_formulas(cls, f: str, g: str = "0", a: Bound = 0, b: Bound = 1,
                      angle: float = DEFAULT_ANGLE_DEG, name: str = "") -> 'SceneSpec':
        """Scene for the plain f(x) / g(x) case."""
        return cls(
            upper=CurveGroup.single(GROUP_UPPER, f),
            lower=CurveGroup.single(GROUP_LOWER, g),
            a=a, b=b, angle=angle, name=name,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary (always the piecewise layout)."""
        return {
            'name': self.name,
            'upper': [p.to_dict() for p in self.upper.pieces],
            'lower': [p.to_dict() for p in self.lower.pieces],
            'a': self.a,
            'b': self.b,
            'angle': self.angle,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any], name: str = "") -> 'SceneSpec':
        """Create a scene from a dictionary.

        Raises:
            SceneError: If the structure is not a scene
        """
        if not isinstance(data, dict):
            raise SceneError(f"Scene must be a JSON object, got {type(data).__name__}")

        try:
            angle = float(data.get('angle', DEFAULT_ANGLE_DEG))
        except (TypeError, ValueError) as e:
            raise SceneError(f"Scene angle must be a number, got {data.get('angle')!r}") from e

        common = dict(
            a=_bound(data, 'a', 0),
            b=_bound(data, 'b', 1),
            angle=angle,
            name=str(data.get('name') or name),
        )

        if 'upper' in data or 'lower' in data:
            return cls(
                upper=CurveGroup(GROUP_UPPER, _pieces(data.get('upper'), GROUP_UPPER)),
                lower=CurveGroup(GROUP_LOWER, _pieces(data.get('lower'), GROUP_LOWER)),
                **common,
            )
        if 'f' in data:
            return cls.from_formulas(str(data['f']), str(data.get('g', '0') or '0'), **common)

        raise SceneError("Scene needs either 'upper'/'lower' piece lists or an 'f' formula")

    @classmethod
    def from_json(cls, json_str: str, name: str = "") -> 'SceneSpec':
        try:
            data = json.loads(json_str)
        except json.JSONDecodeError as e:
            raise SceneError(f"Invalid scene JSON: {e}") from e
        return cls.from_dict(data, name=name)

    @classmethod
    def load(cls, path: Union[str, Path]) -> 'SceneSpec':
        """Load a scene file; the file stem is the default name.

        Raises:
            SceneError: If the file is missing, not JSON or not a scene
        """
        path = Path(path)
        try:
            text = path.read_text(encoding='utf-8')
        except OSError as e:
            raise SceneError(f"Cannot read scene {path}: {e}") from e
        scene = cls.from_json(text, name=path.stem)
        logger.info("Scene loaded from %s", path)
        return scene

    def save(self, path: Union[str, Path]) -> None:
        path = Path(path)
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(self.to_dict(), f, indent=2, ensure_ascii=False)
        logger.info("Scene saved to %s", path)


def _bound(data: Dict[str, Any], key: str, default: Bound) -> Bound:
    value = data.get(key, default)
    if value is None:
        return default
    if isinstance(value, bool) or not isinstance(value, (str, int, float)):
        raise SceneError(f"Bound {key!r} must be a number or formula, got {value!r}")
    return value


def _pieces(raw: Optional[List[Any]], kind: str) -> List[CurvePiece]:
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise SceneError(f"'{kind}' must be a list of pieces")
    pieces = []
    for i, item in enumerate(raw):
        if isinstance(item, str):
            pieces.append(CurvePiece(item))
        elif isinstance(item, dict):
            pieces.append(CurvePiece.from_dict(item))
        else:
            raise SceneError(f"{kind} piece {i} must be an object or formula string")
    return pieces
