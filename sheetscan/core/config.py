"""
Server and table configuration

Options arrive as plain string dicts (the way a host engine hands over
server and table options) and are parsed once into frozen dataclasses.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Mapping, Optional, Type, TypeVar

from sheetscan import __version__
from sheetscan.core.errors import ConfigError

DEFAULT_BASE_URL = "https://docs.google.com/spreadsheets/d"
DEFAULT_USER_AGENT = f"sheetscan/{__version__}"


class EnvelopeMode(Enum):
    """Framing the remote API puts around its JSON payload"""

    PLAIN = "plain"  # bare JSON
    GVIZ = "gviz"  # google.visualization.Query.setResponse(...);
    XSSI = "xssi"  # )]}' prefix, requested with X-DataSource-Auth


class ProjectionStrategy(Enum):
    """How an output column finds its source value"""

    POSITIONAL = "positional"  # column.positional_index
    SEQUENCE = "sequence"  # position in the requested column list


class CoercionMode(Enum):
    """Typed cells with hard errors, or every value as its string literal"""

    TYPED = "typed"
    TEXT = "text"


class NumericFallback(Enum):
    """What an unparsable NUMERIC value becomes"""

    ZERO = "zero"
    ERROR = "error"


E = TypeVar("E", bound=Enum)


def parse_enum_option(
    options: Mapping[str, str], name: str, enum_cls: Type[E], default: E
) -> E:
    """Read an enum-valued option, case-insensitively"""
    raw = options.get(name)
    if raw is None or str(raw).strip() == "":
        return default
    if isinstance(raw, enum_cls):
        return raw
    try:
        return enum_cls(str(raw).strip().lower())
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        raise ConfigError(
            f"Invalid value for option '{name}': {raw!r} (expected one of: {allowed})",
            option=name,
        ) from None


@dataclass(frozen=True)
class AdapterConfig:
    """
    Server-level configuration, resolved once at init

    Attributes:
        base_url: Spreadsheet service URL root
        envelope: Response framing to strip before JSON parsing
        projection: Column-to-source mapping strategy
        coercion: Typed or text projection
        numeric_fallback: Policy for unparsable NUMERIC values
        user_agent: User-Agent header sent with every fetch
    """

    base_url: str = DEFAULT_BASE_URL
    envelope: EnvelopeMode = EnvelopeMode.GVIZ
    projection: ProjectionStrategy = ProjectionStrategy.POSITIONAL
    coercion: CoercionMode = CoercionMode.TYPED
    numeric_fallback: NumericFallback = NumericFallback.ZERO
    user_agent: str = DEFAULT_USER_AGENT

    @classmethod
    def from_options(cls, options: Optional[Mapping[str, str]] = None) -> "AdapterConfig":
        """
        Build config from server options

        ``api_url`` is accepted as an alias for ``base_url``.
        """
        options = options or {}
        base_url = options.get("base_url") or options.get("api_url") or DEFAULT_BASE_URL
        base_url = str(base_url).strip().rstrip("/")
        if not base_url.startswith(("http://", "https://")):
            raise ConfigError(
                f"Invalid value for option 'base_url': {base_url!r} (expected an http(s) URL)",
                option="base_url",
            )

        return cls(
            base_url=base_url,
            envelope=parse_enum_option(options, "envelope", EnvelopeMode, EnvelopeMode.GVIZ),
            projection=parse_enum_option(
                options, "projection", ProjectionStrategy, ProjectionStrategy.POSITIONAL
            ),
            coercion=parse_enum_option(options, "coercion", CoercionMode, CoercionMode.TYPED),
            numeric_fallback=parse_enum_option(
                options, "numeric_fallback", NumericFallback, NumericFallback.ZERO
            ),
            user_agent=options.get("user_agent") or DEFAULT_USER_AGENT,
        )


@dataclass(frozen=True)
class TableRequest:
    """Identifies one remote table: the spreadsheet and, optionally, a tab"""

    object_identifier: str
    sheet: Optional[str] = None
    gid: Optional[str] = None

    @classmethod
    def from_options(cls, options: Optional[Mapping[str, str]] = None) -> "TableRequest":
        """
        Build a request from table options

        ``object`` is required; ``sheet_id`` is accepted as an alias.

        Raises:
            ConfigError: If no table identifier is given
        """
        options = options or {}
        identifier = options.get("object") or options.get("sheet_id")
        if identifier is None or not str(identifier).strip():
            raise ConfigError("Missing required option: 'object'", option="object")

        sheet = options.get("sheet") or None
        gid = options.get("gid")
        return cls(
            object_identifier=str(identifier).strip(),
            sheet=str(sheet) if sheet else None,
            gid=str(gid).strip() if gid not in (None, "") else None,
        )
