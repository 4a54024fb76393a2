import argparse


def parse(argv=None) -> dict:
    parser = argparse.ArgumentParser(
        prog="complgen",
        description="""\
Generate Bash, Zsh, Fish, PowerShell and Elvish completion scripts from a \
declarative JSON or YAML CLI definition and embed them in a C++ source file \
as a shell name to byte array table.""",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    parser.add_argument("-i", "--input",  metavar="INPUT",  type=str, required=True, help="CLI definition file (.json, .yaml or .yml).")
    parser.add_argument("-o", "--output", metavar="OUTPUT", type=str, required=True, help="C++ source file to write.")
    parser.add_argument(      "--check",        action="store_true", default=False, help="Fail if OUTPUT is missing or differs instead of writing it.")
    parser.add_argument(      "--if-different", action="store_true", default=False, help="Leave OUTPUT untouched when its content is unchanged.")
    parser.add_argument("-q", "--quiet",        action="store_true", default=False, help="Only print errors.")

    return vars(parser.parse_args(argv))
