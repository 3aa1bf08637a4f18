from __future__ import annotations

from rich.table import Table
from rich.text import Text

from pygant.driver import Gant
from pygant.logging import Logger


def list_targets(logger: Logger, gant: Gant) -> None:
    """
    List all targets of the loaded script with their descriptions.
    """
    descriptions = gant.target_descriptions()
    if not descriptions:
        logger.info("No targets defined.")
        return

    # Fixed-width name column sized to the longest target name
    max_name_len = max(len(name) for name, _ in descriptions)

    table = Table(show_edge=False, show_header=False, box=None, padding=(0, 2))
    table.add_column("Target", style="bold cyan", no_wrap=True, width=max_name_len)
    table.add_column("Description", style="white", max_width=80)

    for name, description in descriptions:
        # Text() so that brackets in descriptions are not read as markup
        table.add_row(Text(name), Text(description))

    logger.info(table)
