"""
    Firmware catalog:
    the human edited 'firmware-info' file describing, for each supported
    model, the firmware versions available and the (optional) preferred
    version either for the whole model or for a single device.

    Example:

        urlbase  https://ota.example.net/firmware
        model    GW2000
        firmware V3.1.2
        file1    gw2000_v3.1.2_user1.bin
        file2    gw2000_v3.1.2_user2.bin
        log      - Fixed a bug\\r\\n- Fixed another
        want     V3.1.2                       # default for every GW2000
        want     V3.0.9 for dc:da:0c:fa:c5:e0 # pin a single device

    The parser is strict: the whole catalog is rejected on the first error
    since a partially parsed one could advertise binaries not matching
    their changelog.
"""

from dataclasses import dataclass, field
import enum
from typing import TYPE_CHECKING

from . import const as ec
from .helpers import LOGGER
from .protocol import (
    CatalogSourceError,
    MalformedLineError,
    MissingFileError,
    OutOfSequenceError,
    UnknownKeywordError,
)

if TYPE_CHECKING:
    from typing import Iterable


@dataclass
class FirmwareRecord:
    version: str
    file1: str
    file2: str | None = None
    changelog: str = ""


@dataclass
class ModelEntry:
    name: str
    firmware: dict[str, FirmwareRecord] = field(default_factory=dict)
    """firmware records keyed by version (in catalog order)"""
    overrides: dict[str, str] = field(default_factory=dict)
    """wanted version keyed by lower-cased device id or 'default'"""


@dataclass
class Catalog:
    urlbase: str = ""
    models: dict[str, ModelEntry] = field(default_factory=dict)


class ParserState(enum.Enum):
    """Position in the keyword sequence. Any state but START has a model open."""

    START = enum.auto()
    IN_MODEL = enum.auto()
    IN_FIRMWARE = enum.auto()
    IN_FILE1 = enum.auto()
    IN_FILE2 = enum.auto()
    IN_LOG = enum.auto()


def split_line(line: str, /) -> tuple[str, str] | None:
    """
    Strips comments (an unescaped '#' up to the end of line) and surrounding
    whitespace, then splits keyword and value on the first whitespace run.
    An escaped '\\#' is kept in the value as a plain '#'.
    Returns None for blank lines and (keyword, "") when the value is missing.
    """
    line = ec.RE_CATALOG_COMMENT.sub("", line, count=1).strip()
    if not line:
        return None
    fields = line.split(maxsplit=1)
    if len(fields) == 1:
        return fields[0], ""
    return fields[0], fields[1].strip().replace("\\#", "#")


class CatalogParser:
    """
    Builds a Catalog out of the catalog lines. The keyword sequencing rules
    are enforced through the explicit ParserState: every handler checks
    the current state and returns the next one.
    """

    __slots__ = (
        "catalog",
        "state",
        "lineno",
        "_model",
        "_record",
        "_record_lineno",
    )

    def __init__(self):
        self.catalog = Catalog()
        self.state = ParserState.START
        self.lineno = 0
        self._model: ModelEntry | None = None
        self._record: FirmwareRecord | None = None
        self._record_lineno = 0

    def parse(self, lines: "Iterable[str]", /) -> Catalog:
        for line in lines:
            self.lineno += 1
            if not (fields := split_line(line)):
                continue
            keyword, value = fields
            if not value:
                raise MalformedLineError(self.lineno, keyword)
            handler = getattr(self, f"_parse_{keyword.lower()}", None)
            if handler is None:
                raise UnknownKeywordError(self.lineno, keyword)
            self.state = handler(keyword, value)
        if self.state is ParserState.IN_FIRMWARE:
            self._raise_missing_file()
        return self.catalog

    def _raise_missing_file(self):
        raise MissingFileError(self._record_lineno, self._record.version)  # type: ignore

    def _check_model_open(self, keyword: str):
        if self.state is ParserState.START:
            raise OutOfSequenceError(
                self.lineno, keyword, f'a "{ec.CATALOG_MODEL}" entry'
            )
        if self.state is ParserState.IN_FIRMWARE:
            self._raise_missing_file()

    def _check_previous(self, keyword: str, *allowed: ParserState):
        if self.state not in allowed:
            if self.state is ParserState.IN_FIRMWARE:
                self._raise_missing_file()
            raise OutOfSequenceError(
                self.lineno,
                keyword,
                " or ".join(f'"{_STATE_KEYWORD[state]}"' for state in allowed),
            )

    def _commit(self):
        self._model.firmware[self._record.version] = self._record  # type: ignore

    def _parse_urlbase(self, keyword: str, value: str):
        if self.state is ParserState.IN_FIRMWARE:
            self._raise_missing_file()
        self.catalog.urlbase = value
        return ParserState.START if self._model is None else ParserState.IN_MODEL

    def _parse_model(self, keyword: str, value: str):
        if self.state is ParserState.IN_FIRMWARE:
            self._raise_missing_file()
        if value in self.catalog.models:
            LOGGER.warning(
                "Catalog: model %s redefined at line %d", value, self.lineno
            )
        self._model = self.catalog.models[value] = ModelEntry(value)
        self._record = None
        return ParserState.IN_MODEL

    def _parse_firmware(self, keyword: str, value: str):
        self._check_model_open(keyword)
        # the record is pending until its file1 shows up
        self._record = FirmwareRecord(value, "")
        self._record_lineno = self.lineno
        return ParserState.IN_FIRMWARE

    def _parse_file1(self, keyword: str, value: str):
        self._check_previous(keyword, ParserState.IN_FIRMWARE)
        self._record.file1 = value  # type: ignore
        self._commit()
        return ParserState.IN_FILE1

    # legacy single binary models
    _parse_file = _parse_file1

    def _parse_file2(self, keyword: str, value: str):
        self._check_previous(keyword, ParserState.IN_FILE1)
        self._record.file2 = value  # type: ignore
        self._commit()
        return ParserState.IN_FILE2

    def _parse_log(self, keyword: str, value: str):
        self._check_previous(keyword, ParserState.IN_FILE1, ParserState.IN_FILE2)
        self._record.changelog = value  # type: ignore
        self._commit()
        return ParserState.IN_LOG

    def _parse_want(self, keyword: str, value: str):
        self._check_model_open(keyword)
        overrides = self._model.overrides  # type: ignore
        if match := ec.RE_CATALOG_WANT_FOR.match(value):
            overrides[match.group("device").strip().lower()] = match.group(
                "version"
            ).strip()
        else:
            overrides[ec.CATALOG_WANT_DEFAULT] = value
        return ParserState.IN_MODEL


_STATE_KEYWORD = {
    ParserState.IN_FIRMWARE: ec.CATALOG_FIRMWARE,
    ParserState.IN_FILE1: ec.CATALOG_FILE1,
    ParserState.IN_FILE2: ec.CATALOG_FILE2,
}


def parse_catalog(lines: "Iterable[str]", /) -> Catalog:
    return CatalogParser().parse(lines)


def load_catalog(path, /) -> Catalog:
    """
    Reads and parses the catalog file. The file is read in full before
    parsing so that I/O errors and syntax errors are reported separately.
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            lines = f.readlines()
    except OSError as error:
        raise CatalogSourceError(path, error) from error
    return parse_catalog(lines)
