#  -*- coding: utf-8 -*-
"""
Rich terminal rendering for the project tree.

Objects that can be shown in a terminal (the view surface, the store)
derive from :class:`Displayable` and describe a title and a body; the
framing panel, theme and export helpers live here.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from io import StringIO

from rich.text import Text
from rich.panel import Panel
from rich.console import Console, RenderableType
from rich.table import Table
from rich import box

from projectviewer.serialization import Persistable, SerializableProperty


# ========== ========== ========== ========== ========== ==========
class DisplaySettings(Persistable):
    """
    Persistent theme for terminal output.

    Attributes
    ----------
    console_width : int
        Maximum console output width in characters. Default 100.
    property_style : str
        Style for labels in forms. Default 'bold bright_yellow'.
    panel_border_style : str
        Style for panel borders. Default 'bright_cyan'.
    panel_box : str
        Box style name from ``rich.box``. Default 'ROUNDED'.
    panel_title_align : str
        Panel title alignment. Default 'center'.
    tree_guide_style : str
        Style of the guide lines of the project tree. Default 'bright_black'.
    selected_style : str
        Style of the active node in the project tree. Default 'reverse'.
    status_style : str
        Style of the status bar text. Default 'italic'.

    Examples
    --------
    Save a theme and reuse it::

        settings = DisplaySettings()
        settings.panel_border_style = 'green'
        settings.save('green.disp')

        surface.display_settings = DisplaySettings.load('green.disp')
    """

    extension = '.disp'

    # ---------- ---------- ---------- ---------- console
    console_width: int = SerializableProperty(default=100, doc="""
        Maximum width for console output in characters.
        """)

    @console_width.parser
    def console_width(self, value: int) -> int:
        value = int(value)

        if value <= 0:
            raise ValueError(f'console_width must be positive, got {value}')

        return value

    # ---------- ---------- ---------- ---------- property
    property_style: str = SerializableProperty(default='bold bright_yellow', doc="""
        Rich style string for labels in forms created by ``format_as_form``.
        """)

    # ---------- ---------- ---------- ---------- panel
    panel_border_style: str = SerializableProperty(default='bright_cyan', doc="""
        Rich color/style for panel borders, e.g. ``'green'`` or ``'bold red'``.
        """)

    panel_box: str = SerializableProperty(default='ROUNDED', doc="""
        Box style name for panel borders. Must match an attribute of
        ``rich.box`` ('ROUNDED', 'SQUARE', 'DOUBLE', 'HEAVY', 'ASCII', ...).
        """)

    @panel_box.parser
    def panel_box(self, value: str) -> str:
        value = str(value).upper()

        if not isinstance(getattr(box, value, None), box.Box):
            raise ValueError(f'Unknown box style: {value!r}')

        return value

    panel_title_align: str = SerializableProperty(default='center', doc="""
        Panel title alignment: 'left', 'center' or 'right'.
        """)

    @panel_title_align.parser
    def panel_title_align(self, value: str) -> str:
        if value not in ('left', 'center', 'right'):
            raise ValueError(f"panel_title_align must be 'left', 'center' or 'right', got {value!r}")

        return value

    # ---------- ---------- ---------- ---------- tree
    tree_guide_style: str = SerializableProperty(default='bright_black')

    selected_style: str = SerializableProperty(default='reverse')

    status_style: str = SerializableProperty(default='italic')


class Displayable(ABC):
    """
    Abstract base for objects with Rich terminal display.

    Subclasses implement ``_title()`` and ``_content()``; this base builds the
    framing panel and provides ``__str__``/``__rich__`` and SVG export.

    Attributes
    ----------
    display_settings : DisplaySettings
        Theme used for rendering. Each instance gets its own copy by default.
    """
    # ========== ========== ========== ========== ========== class attributes
    display_settings: DisplaySettings = SerializableProperty(copiable=False, doc="""
        Configuration for display formatting and styling. Assign a shared
        DisplaySettings instance to several objects to give them one theme.
        """)

    @display_settings.default
    def display_settings(self):
        return DisplaySettings()

    # ========== ========== ========== ========== ========== special methods
    def __str__(self) -> str:
        string_io = StringIO()
        console = Console(file=string_io,
                          force_terminal=True,
                          width=self.display_settings.console_width)
        console.print(self._display_panel())
        return string_io.getvalue()

    def __rich__(self) -> RenderableType:
        return self._display_panel()

    # ========== ========== ========== ========== ========== protected methods
    @abstractmethod
    def _title(self) -> Text:
        """Return the panel title."""
        ...

    @abstractmethod
    def _content(self) -> RenderableType:
        """Return the panel body."""
        ...

    def _display_panel(self) -> Panel:
        return Panel(
            self._content(),
            title=self._title(),
            border_style=self.display_settings.panel_border_style,
            title_align=self.display_settings.panel_title_align,
            expand=False,
            box=getattr(box, self.display_settings.panel_box)
        )

    # ========== ========== ========== ========== ========== public methods
    def format_as_form(self, data: dict[str, str]) -> Table:
        """
        Format key-value pairs as a two-column form.

        Keys get a trailing ':' and use ``property_style``.

        >>> form = self.format_as_form({'clients': '2', 'projects': '7'})
        """
        form = Table.grid(padding=(0, 4), expand=False)
        form.add_column(justify='left', style=self.display_settings.property_style)
        form.add_column(justify='left', style=None)

        for prop, value in data.items():
            form.add_row(f'{prop}:', value)

        return form

    def to_text(self) -> str:
        """Render without ANSI escape codes."""
        string_io = StringIO()
        console = Console(file=string_io,
                          force_terminal=False,
                          color_system=None,
                          width=self.display_settings.console_width)
        console.print(self._display_panel())
        return string_io.getvalue()

    def to_svg(self) -> str:
        """Export the rendered panel as SVG."""
        console = Console(record=True,
                          file=StringIO(),
                          width=self.display_settings.console_width)
        console.print(self)
        return console.export_svg()


__all__ = [
    'DisplaySettings',
    'Displayable',
]
