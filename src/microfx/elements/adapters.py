"""Adapters from foreign host element shapes to the canonical contract.

Some hosts keep alpha in ``color.a`` instead of ``opacity``, call the
rotation ``angle`` and measure it in degrees, or use camelCase field
names. ``adapt()`` wraps such a host once and returns the same adapter
for the same host on every call, so effects started and stopped through
the adapter find each other in the registry.
"""

from typing import Any, Literal, Mapping, Optional
import logging
import math
import weakref

from microfx.core.errors import ElementContractError
from microfx.elements.element import MICRO_FIELDS
from microfx.utils.identity import WeakIdentityMap

logger = logging.getLogger(__name__)

CAMEL_CASE_FIELDS = {
    "scale_x": "scaleX",
    "scale_y": "scaleY",
    "anchor_x": "anchorX",
    "anchor_y": "anchorY",
}


class MicroAdapter:
    """Presents a host transform bag with canonical field names and radians.

    Args:
        bag: Host transform object
        field_names: Canonical name -> host name overrides
        rotation_field: Host field holding the rotation
        degrees: True if the host rotation is in degrees
    """

    def __init__(
        self,
        bag: Any,
        field_names: Optional[Mapping[str, str]] = None,
        rotation_field: str = "rotation",
        degrees: bool = False,
    ):
        names = {name: name for name in MICRO_FIELDS}
        names.update(field_names or {})
        names["rotation"] = rotation_field

        missing = [host for host in names.values() if not hasattr(bag, host)]
        if missing:
            raise ElementContractError(f"Host transform is missing fields: {', '.join(missing)}")

        object.__setattr__(self, "_bag", bag)
        object.__setattr__(self, "_names", names)
        object.__setattr__(self, "_degrees", degrees)

    @property
    def bag(self) -> Any:
        return self._bag

    def __getattr__(self, name: str) -> Any:
        names = object.__getattribute__(self, "_names")
        if name not in names:
            raise AttributeError(name)
        value = getattr(self._bag, names[name])
        if name == "rotation" and self._degrees:
            return math.radians(value)
        return value

    def __setattr__(self, name: str, value: Any) -> None:
        if name not in self._names:
            raise AttributeError(f"{name!r} is not an animatable transform field")
        if name == "rotation" and self._degrees:
            value = math.degrees(value)
        setattr(self._bag, self._names[name], value)

    def __repr__(self) -> str:
        return f"MicroAdapter({self._bag!r}, degrees={self._degrees})"


class ElementAdapter:
    """Canonical element view of a host object.

    Holds the host weakly; the adapter cache keeps the adapter alive
    exactly as long as the host.
    """

    def __init__(
        self,
        host: Any,
        alpha: Literal["opacity", "color"] = "opacity",
        micro: Optional[Any] = None,
    ):
        self._host = weakref.ref(host)
        self._alpha = alpha
        # arguments adapt() built this view with
        self.options: dict[str, Any] = {"alpha": alpha}
        if alpha == "color" and not hasattr(getattr(host, "color", None), "a"):
            raise ElementContractError(f"{type(host).__name__} has no color.a field")
        if alpha == "opacity" and not hasattr(host, "opacity"):
            raise ElementContractError(f"{type(host).__name__} has no opacity field")
        self.micro = micro if micro is not None else host.micro

    @property
    def host(self) -> Any:
        host = self._host()
        if host is None:
            raise ElementContractError("Adapted host element no longer exists")
        return host

    @property
    def opacity(self) -> float:
        if self._alpha == "color":
            return self.host.color.a
        return self.host.opacity

    @opacity.setter
    def opacity(self, value: float) -> None:
        if self._alpha == "color":
            self.host.color.a = value
        else:
            self.host.opacity = value

    def __repr__(self) -> str:
        return f"ElementAdapter({self._host()!r}, alpha={self._alpha!r})"


_adapters: WeakIdentityMap[ElementAdapter] = WeakIdentityMap()

_ADAPT_DEFAULTS = {"alpha": "opacity", "degrees": False, "rotation_field": "rotation", "field_names": {}}


def adapt(
    host: Any,
    alpha: Optional[Literal["opacity", "color"]] = None,
    degrees: Optional[bool] = None,
    rotation_field: Optional[str] = None,
    field_names: Optional[Mapping[str, str]] = None,
) -> ElementAdapter:
    """Return the canonical view of ``host``, creating it on first use.

    Arguments left as None take the defaults on first use and accept
    whatever the cached adapter was built with afterwards.

    Args:
        host: Host element
        alpha: "color" if the host stores alpha in ``color.a``
        degrees: True if the host rotation is in degrees
        rotation_field: Host field name of the rotation (e.g. "angle")
        field_names: Extra canonical -> host field name overrides,
            e.g. CAMEL_CASE_FIELDS

    Raises:
        ElementContractError: If the host lacks a required field, or was
            already adapted with different arguments
    """
    given = {
        "alpha": alpha,
        "degrees": degrees,
        "rotation_field": rotation_field,
        "field_names": dict(field_names) if field_names is not None else None,
    }
    given = {key: value for key, value in given.items() if value is not None}

    existing = _adapters.get(host)
    if existing is not None:
        conflicts = [key for key, value in given.items() if existing.options[key] != value]
        if conflicts:
            raise ElementContractError(
                f"{type(host).__name__} is already adapted with different {', '.join(conflicts)}"
            )
        return existing

    options = {**_ADAPT_DEFAULTS, **given}
    micro = getattr(host, "micro", None)
    if micro is None:
        raise ElementContractError(f"{type(host).__name__} has no 'micro' transform bag")

    if options["degrees"] or options["rotation_field"] != "rotation" or options["field_names"]:
        micro = MicroAdapter(micro, options["field_names"], options["rotation_field"], options["degrees"])

    adapter = ElementAdapter(host, alpha=options["alpha"], micro=micro)
    adapter.options = options
    _adapters[host] = adapter
    logger.debug(f"Adapted {type(host).__name__} (alpha={options['alpha']}, degrees={options['degrees']})")
    return adapter
