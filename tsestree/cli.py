"""
Command line interface: convert files and print the standardized tree as JSON.
"""

import argparse
import json
import logging
import os
import sys
from typing import Any, Dict, List, Optional

from .errors import TSESTreeError
from .options import find_options_file, load_options_file
from .parser import parse_and_generate_services
from .schema import ast_to_dict, validate_ast


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tsestree",
        description="Convert TypeScript/TSX files into ESTree-shaped JSON",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  tsestree src/index.ts --range --loc
  tsestree src/app.tsx --project tsconfig.json --tokens --comment
  tsestree src/util.ts --project . --create-default-program --validate
        """
    )

    parser.add_argument("files", nargs="+", help="Files to convert")
    parser.add_argument(
        "--project", "-p",
        action="append",
        help="tsconfig.json (or directory holding one); repeatable"
    )
    parser.add_argument("--tsconfig-root-dir", help="Base directory for relative --project paths")
    parser.add_argument("--loc", action="store_true", help="Attach line/column locations")
    parser.add_argument("--range", action="store_true", help="Attach byte-offset ranges")
    parser.add_argument("--tokens", action="store_true", help="Emit the token list")
    parser.add_argument("--comment", action="store_true", help="Emit the comment list")
    parser.add_argument("--jsx", action="store_true", help="Treat files with unknown extensions as TSX")
    parser.add_argument("--use-jsx-text-node", action="store_true", help="Emit JSXText instead of Literal")
    parser.add_argument(
        "--create-default-program",
        action="store_true",
        help="Synthesize a single-file program for files outside every project"
    )
    parser.add_argument("--config", help="Path to a YAML options file")
    parser.add_argument("--validate", action="store_true", help="Validate JSON output against schema")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose output")
    return parser


def _options_for(args: argparse.Namespace, path: str, base: Dict[str, Any]) -> Dict[str, Any]:
    options = dict(base)
    options["filePath"] = os.path.abspath(path)
    if args.project:
        options["project"] = args.project
    if args.tsconfig_root_dir:
        options["tsconfigRootDir"] = args.tsconfig_root_dir
    flags = {
        "loc": args.loc,
        "range": args.range,
        "tokens": args.tokens,
        "comment": args.comment,
        "jsx": args.jsx,
        "useJSXTextNode": args.use_jsx_text_node,
        "createDefaultProgram": args.create_default_program,
    }
    for name, value in flags.items():
        if value:
            options[name] = True
    return options


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    args = _build_parser().parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, stream=sys.stderr)

    config_path = args.config or find_options_file(args.files[0])
    if args.verbose:
        print(f"Using options: {config_path or 'defaults'}", file=sys.stderr)

    results = []
    try:
        base = load_options_file(config_path) if config_path else {}
        for path in args.files:
            with open(path, "r", encoding="utf-8") as f:
                code = f.read()
            ast, services = parse_and_generate_services(code, _options_for(args, path, base))
            data = ast_to_dict(ast)
            if args.validate:
                errors = validate_ast(data)
                if errors:
                    print(f"Schema validation failed for {path}:", file=sys.stderr)
                    for error in errors:
                        print(f"  {error}", file=sys.stderr)
                    return 1
            if args.verbose:
                program = services.program
                print(f"{path}: program {program.config_file_path if program else None}", file=sys.stderr)
            results.append(data)
    except (TSESTreeError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    output = results[0] if len(results) == 1 else results
    print(json.dumps(output, indent=2, default=str))
    return 0


if __name__ == "__main__":
    sys.exit(main())
