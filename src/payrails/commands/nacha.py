"""nacha group: generate, validate, inspect, and roundtrip NACHA files."""

from __future__ import annotations

from pathlib import Path

import click
from pydantic import ValidationError

from payrails.commands._base import PayrailsGroup
from payrails.commands._context import AppContext
from payrails.services.contracts import BatchRequest

_FILE = click.Path(exists=True, dir_okay=False, path_type=Path)


def read_nacha_text(path: Path) -> str:
    """File contents as ASCII, line endings untouched."""
    try:
        return path.read_bytes().decode("ascii")
    except UnicodeDecodeError as exc:
        raise click.ClickException(
            f"{path} is not ASCII text (byte {exc.start} is 0x{exc.object[exc.start]:02x})"
        ) from exc


@click.group(
    cls=PayrailsGroup,
    examples="""\
  payrails nacha generate batch.json -o payroll.ach
  payrails nacha validate payroll.ach
  payrails nacha inspect payroll.ach
  payrails --json nacha roundtrip payroll.ach""",
)
def nacha() -> None:
    """Generate, validate, and inspect NACHA ACH files."""


@nacha.command(
    examples="""\
  payrails nacha generate batch.json
  payrails nacha generate batch.json --output payroll.ach

  batch.json:
    {"sec_code": "PPD", "entry_description": "PAYROLL",
     "entries": [{"name": "Jane Doe", "routing_number": "011000015",
                  "account_number": "123456789", "amount": "12.34"}]}""",
)
@click.argument("batch_file", type=_FILE)
@click.option(
    "-o",
    "--output",
    type=click.Path(dir_okay=False, writable=True, path_type=Path),
    default=None,
    help="Write the NACHA text here instead of stdout.",
)
@click.pass_obj
def generate(app: AppContext, batch_file: Path, output: Path | None) -> None:
    """Build a one-batch NACHA file from a JSON batch description."""
    try:
        request = BatchRequest.model_validate_json(batch_file.read_text(encoding="utf-8"))
    except ValidationError as exc:
        raise click.ClickException(f"Invalid batch file {batch_file}:\n{exc}") from exc

    result = app.nacha_service.generate(request)
    if not result.ok:
        app.emit(result)
        return

    text = result.data["text"]
    if output is None:
        if app.settings.json_output:
            app.emit(result)
        else:
            click.echo(text)
        return

    output.write_bytes(text.encode("ascii"))
    data = {k: v for k, v in result.data.items() if k != "text"}
    app.emit(result.model_copy(update={"data": {**data, "output": str(output)}}))


@nacha.command(examples="  payrails nacha validate payroll.ach")
@click.argument("file", type=_FILE)
@click.pass_obj
def validate(app: AppContext, file: Path) -> None:
    """Check a NACHA file's structure and control totals."""
    app.emit(app.nacha_service.validate(read_nacha_text(file)))


@nacha.command(
    examples="  payrails nacha inspect payroll.ach\n  payrails --json nacha inspect payroll.ach"
)
@click.argument("file", type=_FILE)
@click.pass_obj
def inspect(app: AppContext, file: Path) -> None:
    """Parse a NACHA file and summarize its batches."""
    app.emit(app.nacha_service.inspect(read_nacha_text(file)))


@nacha.command(examples="  payrails nacha roundtrip payroll.ach")
@click.argument("file", type=_FILE)
@click.pass_obj
def roundtrip(app: AppContext, file: Path) -> None:
    """Parse and regenerate a file; fail unless the output is byte-identical."""
    app.emit(app.nacha_service.roundtrip(read_nacha_text(file)))
