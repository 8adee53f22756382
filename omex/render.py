"""
Rendering of archive contents as rich tables.
"""

from typing import TYPE_CHECKING

from rich.table import Table

if TYPE_CHECKING:
    from .archive import CombineArchive


def render_entries(archive: "CombineArchive") -> Table:
    described = {x.about for x in archive.descriptions}

    table = Table(title=archive.archive_file_name)

    table.add_column("Location", style="bold")
    table.add_column("Format")
    table.add_column("Local File")
    table.add_column("Described")

    for entry in archive:
        local_file = archive.local_file(entry)

        table.add_row(
            entry.location,
            entry.format,
            str(local_file) if local_file is not None else "[italic]remote[/italic]",
            "yes" if entry.location in described else "",
        )

    return table


def render_descriptions(archive: "CombineArchive") -> Table:
    table = Table(title=f"Descriptions of {archive.archive_file_name}")

    table.add_column("About", style="bold")
    table.add_column("Description")
    table.add_column("Creators")
    table.add_column("Created")
    table.add_column("Modified")

    for description in archive.descriptions:
        table.add_row(
            description.about or "[italic]archive[/italic]",
            description.description or "",
            ", ".join(str(x) for x in description.creators if not x.empty),
            description.created.isoformat() if description.created else "",
            ", ".join(x.isoformat() for x in description.modified),
        )

    return table
