import os, json, stat, tempfile, yaml, typing


class ComplgenException(Exception):
    stage: str = None

    def __init__(self, message: str, stage: str = None):
        super().__init__(message)
        if stage is not None:
            self.stage = stage

    def __str__(self) -> str:
        msg = super().__str__()
        if self.stage is None:
            return msg

        return f"{self.stage}: {msg}"


class InputAccessError(ComplgenException):
    stage = "read"


class SchemaError(ComplgenException):
    stage = "parse"


class NamingConflictError(ComplgenException):
    stage = "build"


class CompletionGenerationError(ComplgenException):
    stage = "complete"


class SerializationError(ComplgenException):
    stage = "serialize"


class OutputWriteError(ComplgenException):
    stage = "write"


class OutOfDateError(ComplgenException):
    stage = "check"


def file_read(filepath: str) -> str:
    try:
        with open(filepath, "r", encoding="utf-8") as f:
            return f.read()
    except UnicodeDecodeError as exc:
        raise SchemaError(f'"{filepath}" is not valid UTF-8: {exc}') from exc
    except IOError as exc:
        raise InputAccessError(f'Failed to read from "{filepath}": {exc}') from exc


def _file_matches(filepath: str, content: str) -> bool:
    if not os.path.isfile(filepath):
        return False

    try:
        with open(filepath, "r", encoding="utf-8", newline="") as f:
            return f.read() == content
    except UnicodeDecodeError:
        return False


def file_write(filepath: str, content: str, if_different: bool = False) -> bool:
    """
    Writes content to filepath in one go. Returns False when if_different
    is set and the file already holds exactly this content.

    The content goes to a temporary file next to filepath which then replaces
    it. A failed write leaves filepath as it was.
    """

    tmppath = None
    try:
        if if_different and _file_matches(filepath, content):
            return False

        mode = 0o644
        if os.path.isfile(filepath):
            mode = stat.S_IMODE(os.stat(filepath).st_mode)

        fd, tmppath = tempfile.mkstemp(
            prefix=f".{os.path.basename(filepath)}.", suffix=".tmp",
            dir=os.path.dirname(os.path.abspath(filepath)))
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
            f.write(content)
        os.chmod(tmppath, mode)
        os.replace(tmppath, filepath)
        tmppath = None
    except IOError as exc:
        raise OutputWriteError(f'Failed to write to "{filepath}": {exc}') from exc
    finally:
        if tmppath is not None and os.path.exists(tmppath):
            os.remove(tmppath)

    return True


def is_yaml_path(filepath: str) -> bool:
    return os.path.splitext(filepath)[1].lower() in (".yaml", ".yml")


def load_document(filepath: str) -> typing.Any:
    """
    Reads and decodes a declarative document. Files ending in .yaml or .yml
    are read as YAML, everything else as JSON.
    """

    content = file_read(filepath)

    if is_yaml_path(filepath):
        try:
            return yaml.safe_load(content)
        except yaml.YAMLError as exc:
            raise SchemaError(f'Failed to load YAML from "{filepath}": {exc}') from exc

    try:
        return json.loads(content)
    except json.JSONDecodeError as exc:
        raise SchemaError(f'Failed to load JSON from "{filepath}": {exc}') from exc


def isspace(s: str) -> bool:
    """
    Returns whether a string, s, is empty, whitespace, or None.
    """

    if s is None:
        return True

    return len(s.strip()) == 0

