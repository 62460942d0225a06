from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from .codec import render
from .core import DataFile
from .errors import (
    AlreadyExistsError,
    DataFileError,
    DataFileIOError,
    InvalidStateError,
    NotFoundError,
    ParseError,
)
from .export import to_json, to_toml
from .model import DEFAULT_SECTION
from .options import Flags
from .paths import DEFAULT_FILENAME, settings_file

_GETTERS = {
    "str": DataFile.get_string,
    "int": DataFile.get_int,
    "float": DataFile.get_float,
    "bool": DataFile.get_bool,
}


def _target(args: argparse.Namespace) -> Path:
    if args.file is not None:
        return args.file
    if args.app:
        return settings_file(args.app, args.filename)
    raise InvalidStateError("one of --file or --app is required")


def _open(args: argparse.Namespace, *, must_exist: bool = True, flags: Flags = Flags.DEFAULT) -> DataFile:
    path = _target(args)
    if must_exist and not path.is_file():
        raise DataFileIOError(path, "no such file")
    return DataFile(path, flags=flags)


def _commit(datafile: DataFile) -> None:
    Path(datafile.file_name).parent.mkdir(parents=True, exist_ok=True)
    if not datafile.save():
        raise InvalidStateError(f"could not save {datafile.file_name}")


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


def show_paths(args: argparse.Namespace) -> int:
    path = _target(args)
    if args.as_json:
        print(json.dumps({"settings_file": str(path)}))
    else:
        print(str(path))
    return 0


def get_cmd(args: argparse.Namespace) -> int:
    datafile = _open(args)
    if not datafile.has_key(args.key, args.section):
        raise NotFoundError(f"key {args.key!r} not found in [{args.section}]")
    value = _GETTERS[args.type](datafile, args.key, args.section)
    if value is None:
        raise ParseError(f"value of {args.key!r} is not a valid {args.type}")
    print(value)
    return 0


def set_cmd(args: argparse.Namespace) -> int:
    flags = Flags.NONE if args.no_create else Flags.DEFAULT
    datafile = _open(args, must_exist=False, flags=flags)
    comment = args.comment
    if comment is None:
        existing = datafile.find_key(args.key, args.section)
        comment = existing.comment if existing is not None else ""
    if not datafile.set_value(args.key, args.value, comment, args.section):
        raise NotFoundError(f"key {args.key!r} not found in [{args.section}]")
    _commit(datafile)
    return 0


def delete_cmd(args: argparse.Namespace) -> int:
    datafile = _open(args)
    if args.key is None:
        if not args.section:
            print("Refusing to delete the default section", file=sys.stderr)
            return 2
        if not datafile.delete_section(args.section):
            raise NotFoundError(f"section [{args.section}] not found")
    elif not datafile.delete_key(args.key, args.section):
        raise NotFoundError(f"key {args.key!r} not found in [{args.section}]")
    _commit(datafile)
    return 0


def add_section_cmd(args: argparse.Namespace) -> int:
    datafile = _open(args, must_exist=False)
    if not datafile.create_section(args.name, args.comment):
        raise AlreadyExistsError(f"section [{args.name}] already exists")
    _commit(datafile)
    return 0


def comment_cmd(args: argparse.Namespace) -> int:
    datafile = _open(args)
    if args.key is None:
        ok = datafile.set_section_comment(args.section, args.text)
    else:
        ok = datafile.set_key_comment(args.key, args.text, args.section)
    if not ok:
        raise NotFoundError(f"no such entry: [{args.section}] {args.key or ''}".rstrip())
    _commit(datafile)
    return 0


def sections_cmd(args: argparse.Namespace) -> int:
    datafile = _open(args)
    for name in datafile.section_names():
        if name:
            print(name)
    return 0


def keys_cmd(args: argparse.Namespace) -> int:
    datafile = _open(args)
    if not datafile.has_section(args.section):
        raise NotFoundError(f"section [{args.section}] not found")
    for name in datafile.key_names(args.section):
        print(name)
    return 0


def show_cmd(args: argparse.Namespace) -> int:
    datafile = _open(args)
    if args.format == "json":
        print(to_json(datafile))
    elif args.format == "toml":
        print(to_toml(datafile).rstrip("\n"))
    else:
        print(render(datafile, datafile.dialect).strip("\n"))
    return 0


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------


def _add_target(p: argparse.ArgumentParser) -> None:
    p.add_argument("--file", type=Path, help="Data file to operate on")
    p.add_argument("--app", help="Use the per-user settings file of APP")
    p.add_argument("--filename", default=DEFAULT_FILENAME, help="Settings file name used with --app")


def build_parser(prog: str = "pydatafile") -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog=prog, description="Read and edit INI-style data files.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log diagnostic messages")
    subparsers = parser.add_subparsers(dest="command", required=True)

    p_paths = subparsers.add_parser("paths", help="Show the resolved data file path.")
    _add_target(p_paths)
    p_paths.add_argument("--json", dest="as_json", action="store_true")
    p_paths.set_defaults(func=show_paths)

    p_get = subparsers.add_parser("get", help="Print the value for KEY.")
    p_get.add_argument("key")
    p_get.add_argument("--section", default=DEFAULT_SECTION)
    p_get.add_argument("--as", dest="type", choices=sorted(_GETTERS), default="str")
    _add_target(p_get)
    p_get.set_defaults(func=get_cmd)

    p_set = subparsers.add_parser("set", help="Set KEY to VALUE.")
    p_set.add_argument("key")
    p_set.add_argument("value")
    p_set.add_argument("--section", default=DEFAULT_SECTION)
    p_set.add_argument("--comment", default=None, help="Replace the key comment")
    p_set.add_argument("--no-create", action="store_true", help="Only update existing keys")
    _add_target(p_set)
    p_set.set_defaults(func=set_cmd)

    p_del = subparsers.add_parser("delete", help="Delete KEY, or the whole section without KEY.")
    p_del.add_argument("key", nargs="?")
    p_del.add_argument("--section", default=DEFAULT_SECTION)
    _add_target(p_del)
    p_del.set_defaults(func=delete_cmd)

    p_add = subparsers.add_parser("add-section", help="Create an empty section.")
    p_add.add_argument("name")
    p_add.add_argument("--comment", default="")
    _add_target(p_add)
    p_add.set_defaults(func=add_section_cmd)

    p_com = subparsers.add_parser("comment", help="Set the comment of a section or KEY.")
    p_com.add_argument("key", nargs="?")
    p_com.add_argument("--section", default=DEFAULT_SECTION)
    p_com.add_argument("--text", required=True)
    _add_target(p_com)
    p_com.set_defaults(func=comment_cmd)

    p_secs = subparsers.add_parser("sections", help="List section names.")
    _add_target(p_secs)
    p_secs.set_defaults(func=sections_cmd)

    p_keys = subparsers.add_parser("keys", help="List key names of a section.")
    p_keys.add_argument("--section", default=DEFAULT_SECTION)
    _add_target(p_keys)
    p_keys.set_defaults(func=keys_cmd)

    p_show = subparsers.add_parser("show", help="Print the data file.")
    p_show.add_argument("--as", dest="format", choices=["ini", "json", "toml"], default="ini")
    _add_target(p_show)
    p_show.set_defaults(func=show_cmd)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
    )
    func = getattr(args, "func", None)
    if func is None:
        parser.print_help()
        return 1
    try:
        return int(func(args))
    except (NotFoundError, ParseError, AlreadyExistsError) as exc:
        print(str(exc), file=sys.stderr)
        return 1
    except (DataFileError, ValueError) as exc:
        print(str(exc), file=sys.stderr)
        return 2


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
