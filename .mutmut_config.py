"""
Mutation testing configuration for mutmut.

Mutates the sync logic only. Argument parsing, console wording and logging
calls are skipped, the unit tests do not pin them down line by line.
"""

SKIPPED_FILES = (
    "__init__.py",
    "__main__.py",
    "cli/parser.py",
)


def pre_mutation(context):
    """
    Hook called before each mutation.

    Skips files and source lines with little behavior to verify.
    """
    if "tests/" in context.filename or context.filename.endswith(SKIPPED_FILES):
        context.skip = True
        return

    line = context.current_source_line.strip()

    # Logging and span decoration do not change what is written to the store
    if line.startswith(("logger.", "self.logger.", "add_span_attributes(", "add_span_event(")):
        context.skip = True

    if line.startswith("print("):
        context.skip = True

    # Docstrings
    if '"""' in line:
        context.skip = True
