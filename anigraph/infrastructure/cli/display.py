"""Renders catalog entities to the terminal with rich."""

import logging
from typing import Any, Optional, Sequence

from rich.box import HEAVY, ROUNDED, SIMPLE
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from anigraph.domain.interfaces.user_interface import UserInterface
from anigraph.domain.models.character import Character, CharacterEdge
from anigraph.domain.models.media import CoverImage, Media, RelatedMediaEdge

logger = logging.getLogger(__name__)

DESCRIPTION_PREVIEW_CHARS = 300


def _enum_text(value: Any) -> str:
    return value.value if value is not None else "-"

def _or_dash(value: Any) -> str:
    return "-" if value is None else str(value)

def _preview(text: Optional[str], limit: int = DESCRIPTION_PREVIEW_CHARS) -> str:
    if not text:
        return ""
    # Descriptions come with light HTML (<br>, <i>); keep them readable as plain text
    plain = text.replace("<br>", "\n").replace("<i>", "").replace("</i>", "").replace("<b>", "").replace("</b>", "")
    return plain if len(plain) <= limit else plain[: limit - 3] + "..."


class ConsoleDisplay(UserInterface):
    """Concrete implementation of UserInterface using the rich library."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def _color_swatch(self, cover: Optional[CoverImage]) -> Text:
        if cover is None or cover.color is None:
            return Text("none", style="dim")
        r, g, b = cover.color
        return Text(f"■ {cover.color_hex}", style=f"rgb({r},{g},{b})")

    def display_media(self, media: Media, **kwargs: Any) -> None:
        table = Table(show_header=False, box=SIMPLE, padding=(0, 1))
        table.add_column("Field", style="bold cyan")
        table.add_column("Value")
        title = media.title
        table.add_row("Romaji", _or_dash(title.romaji if title else None))
        table.add_row("English", _or_dash(title.english if title else None))
        table.add_row("Native", _or_dash(title.native if title else None))
        table.add_row("Type", _enum_text(media.type))
        table.add_row("Status", _enum_text(media.status))
        season = f"{_enum_text(media.season)} {_or_dash(media.season_year)}"
        table.add_row("Season", season)
        table.add_row("Aired", f"{_or_dash(media.start_date)} → {_or_dash(media.end_date)}")
        table.add_row("Episodes", _or_dash(media.episodes))
        table.add_row("Score", _or_dash(media.average_score))
        table.add_row("Genres", ", ".join(media.genres) if media.genres else "-")
        table.add_row("Color", self._color_swatch(media.cover_image))
        table.add_row("URL", _or_dash(media.site_url))
        if media.relations:
            table.add_row("Relations", str(len(media.relations)))
        if media.characters:
            table.add_row("Characters", str(len(media.characters)))

        self.console.print(Panel(
            table,
            title=f"[bold]{escape(media.display_title)}[/bold] [dim]#{media.id}[/dim]",
            title_align="left",
            border_style="cyan",
            box=ROUNDED,
        ))
        description = _preview(media.description)
        if description:
            self.console.print(Text(description, style="dim"))

    def display_media_list(self, media: Sequence[Media], title: str = "Media", **kwargs: Any) -> None:
        table = Table(title=title, box=ROUNDED, border_style="cyan")
        table.add_column("#", justify="right", style="cyan")
        table.add_column("Id", justify="right")
        table.add_column("Title", style="bold")
        table.add_column("Type")
        table.add_column("Status")
        table.add_column("Season")
        table.add_column("Score", justify="right")
        table.add_column("Color")
        for i, entry in enumerate(media, 1):
            table.add_row(
                str(i), str(entry.id), escape(entry.display_title), _enum_text(entry.type),
                _enum_text(entry.status), f"{_enum_text(entry.season)} {_or_dash(entry.season_year)}",
                _or_dash(entry.average_score), self._color_swatch(entry.cover_image),
            )
        self.console.print(table)

    def display_related_media(self, edges: Sequence[RelatedMediaEdge], **kwargs: Any) -> None:
        table = Table(title="Related media", box=ROUNDED, border_style="magenta")
        table.add_column("Relation", style="bold magenta")
        table.add_column("Id", justify="right")
        table.add_column("Title", style="bold")
        table.add_column("Type")
        table.add_column("Own relations", justify="right")
        table.add_column("Characters", justify="right")
        for edge in edges:
            node = edge.node
            if node is None:
                table.add_row(edge.relation_type.value, "-", "-", "-", "-", "-")
                continue
            table.add_row(
                edge.relation_type.value, str(node.id), escape(node.display_title), _enum_text(node.type),
                str(len(node.relations or ())), str(len(node.characters or ())),
            )
        self.console.print(table)

    def display_character(self, character: Character, **kwargs: Any) -> None:
        name = character.name
        table = Table(show_header=False, box=SIMPLE, padding=(0, 1))
        table.add_column("Field", style="bold green")
        table.add_column("Value")
        table.add_row("Full", _or_dash(name.full if name else None))
        table.add_row("Native", _or_dash(name.native if name else None))
        if name and name.alternative:
            table.add_row("Also known as", ", ".join(name.alternative))
        table.add_row("URL", _or_dash(character.site_url))
        table.add_row("Image", _or_dash(character.image.large if character.image else None))
        self.console.print(Panel(
            table,
            title=f"[bold]{escape(character.display_name)}[/bold] [dim]#{character.id}[/dim]",
            title_align="left",
            border_style="green",
            box=ROUNDED,
        ))
        description = _preview(character.description)
        if description:
            self.console.print(Text(description, style="dim"))

    def display_character_list(self, characters: Sequence[Character], title: str = "Characters", **kwargs: Any) -> None:
        table = Table(title=title, box=ROUNDED, border_style="green")
        table.add_column("#", justify="right", style="green")
        table.add_column("Id", justify="right")
        table.add_column("Name", style="bold")
        table.add_column("Native")
        for i, character in enumerate(characters, 1):
            native = character.name.native if character.name else None
            table.add_row(str(i), str(character.id), escape(character.display_name), _or_dash(native))
        self.console.print(table)

    def display_character_edges(self, edges: Sequence[CharacterEdge], **kwargs: Any) -> None:
        table = Table(title="Characters", box=ROUNDED, border_style="green")
        table.add_column("Role", style="bold green")
        table.add_column("Id", justify="right")
        table.add_column("Name", style="bold")
        for edge in edges:
            node = edge.node
            table.add_row(
                edge.role.value,
                str(node.id) if node else "-",
                escape(node.display_name) if node else "-",
            )
        self.console.print(table)

    def display_error(self, error_message: str, **kwargs: Any) -> None:
        self.console.print(Panel(
            Text(error_message, style="white"),
            title="[bold red]Error[/bold red]",
            border_style="red",
            box=HEAVY,
            padding=(0, 1),
        ))

    def display_warning(self, warning_message: str, **kwargs: Any) -> None:
        logger.warning(f"Display warning: {warning_message}")
        self.console.print(Panel(
            Text(warning_message, style="white"),
            title="[bold yellow]Warning[/bold yellow]",
            border_style="yellow",
            box=HEAVY,
            padding=(0, 1),
        ))

    def display_info(self, info_message: str, **kwargs: Any) -> None:
        self.console.print(Panel(
            Text(info_message, style="white"),
            title="[bold blue]Info[/bold blue]",
            border_style="blue",
            box=SIMPLE,
            padding=(0, 1),
        ))
