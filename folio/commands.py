"""Command pattern implementation for reader actions."""

from abc import ABC, abstractmethod
from typing import Dict, Tuple, Optional, TYPE_CHECKING
from .font_config import FONT_SIZE_STEP, get_font_config, next_font_family, next_font_size_preset
from .keyboard import KeyType
from .themes import next_theme

if TYPE_CHECKING:
    from .reader import Reader
    from .keyboard import KeyEvent


class ReaderCommand(ABC):
    """Base class for reader commands."""

    @abstractmethod
    def execute(self, reader: 'Reader', key_event: 'KeyEvent') -> bool:
        """Execute the command.

        Args:
            reader: Reader instance
            key_event: The key event that triggered this command

        Returns:
            True if the screen needs to be redrawn
        """
        pass


class NavigationCommand(ReaderCommand):
    """Base class for page navigation commands."""

    def execute(self, reader: 'Reader', key_event: 'KeyEvent') -> bool:
        return self._move(reader)

    @abstractmethod
    def _move(self, reader: 'Reader') -> bool:
        """Move the reading position; return True if it changed."""
        pass


class NextPageCommand(NavigationCommand):
    def _move(self, reader):
        return reader.position.next_page()


class PrevPageCommand(NavigationCommand):
    def _move(self, reader):
        return reader.position.prev_page()


class FirstPageCommand(NavigationCommand):
    def _move(self, reader):
        return reader.position.first_page()


class LastPageCommand(NavigationCommand):
    def _move(self, reader):
        return reader.position.last_page()


class LayoutCommand(ReaderCommand):
    """Base class for commands that change the layout and force re-pagination."""

    def execute(self, reader: 'Reader', key_event: 'KeyEvent') -> bool:
        self._apply(reader)
        reader.repaginate()
        return True

    @abstractmethod
    def _apply(self, reader: 'Reader'):
        pass


class FontSizeUpCommand(LayoutCommand):
    def _apply(self, reader):
        reader.set_font_size(reader.font_size + FONT_SIZE_STEP)


class FontSizeDownCommand(LayoutCommand):
    def _apply(self, reader):
        reader.set_font_size(reader.font_size - FONT_SIZE_STEP)


class FontSizePresetCommand(LayoutCommand):
    def _apply(self, reader):
        _, size = next_font_size_preset(reader.font_size)
        reader.set_font_size(size)


class CycleFontFamilyCommand(LayoutCommand):
    def _apply(self, reader):
        reader.font_family = next_font_family(reader.font_family)
        reader.status_message = f"Font: {get_font_config(reader.font_family).label}"


class ToggleLineNumbersCommand(LayoutCommand):
    def _apply(self, reader):
        reader.show_line_numbers = not reader.show_line_numbers


class NarrowerLinesCommand(LayoutCommand):
    def _apply(self, reader):
        reader.set_line_width(int(reader.current_layout().max_width_units) - 1)


class WiderLinesCommand(LayoutCommand):
    def _apply(self, reader):
        reader.set_line_width(int(reader.current_layout().max_width_units) + 1)


class ShorterPageCommand(LayoutCommand):
    def _apply(self, reader):
        reader.set_page_height(reader.current_layout().max_height - 1)


class TallerPageCommand(LayoutCommand):
    def _apply(self, reader):
        reader.set_page_height(reader.current_layout().max_height + 1)


class ToggleAutoWidthCommand(LayoutCommand):
    def _apply(self, reader):
        reader.toggle_auto_width()


class CycleThemeCommand(ReaderCommand):
    def execute(self, reader, key_event):
        reader.theme = next_theme(reader.theme)
        reader.status_message = f"Theme: {reader.theme}"
        return True


class ExportPdfCommand(ReaderCommand):
    def execute(self, reader, key_event):
        reader.export_pdf()
        return True


class HelpCommand(ReaderCommand):
    def execute(self, reader, key_event):
        reader.show_help()
        return True


class QuitCommand(ReaderCommand):
    def execute(self, reader, key_event):
        reader.running = False
        return False


class CommandRegistry:
    """Registry mapping key combinations to commands."""

    def __init__(self):
        """Initialize the command registry."""
        self._commands: Dict[Tuple[KeyType, str], ReaderCommand] = {}
        self._setup_default_commands()

    def _setup_default_commands(self):
        """Set up the default command mappings."""
        # Page navigation
        for key in ((KeyType.SPECIAL, 'right'), (KeyType.SPECIAL, 'page_down'),
                    (KeyType.SPECIAL, 'down'), (KeyType.SPECIAL, 'enter'),
                    (KeyType.REGULAR, ' '), (KeyType.REGULAR, 'n')):
            self.register(key, NextPageCommand())
        for key in ((KeyType.SPECIAL, 'left'), (KeyType.SPECIAL, 'page_up'),
                    (KeyType.SPECIAL, 'up'), (KeyType.SPECIAL, 'backspace'),
                    (KeyType.REGULAR, 'p')):
            self.register(key, PrevPageCommand())
        self.register((KeyType.SPECIAL, 'home'), FirstPageCommand())
        self.register((KeyType.SPECIAL, 'end'), LastPageCommand())

        # Font and layout
        self.register((KeyType.REGULAR, '+'), FontSizeUpCommand())
        self.register((KeyType.REGULAR, '='), FontSizeUpCommand())
        self.register((KeyType.REGULAR, '-'), FontSizeDownCommand())
        self.register((KeyType.REGULAR, 's'), FontSizePresetCommand())
        self.register((KeyType.REGULAR, 'f'), CycleFontFamilyCommand())
        self.register((KeyType.REGULAR, 'l'), ToggleLineNumbersCommand())
        self.register((KeyType.REGULAR, 't'), CycleThemeCommand())
        self.register((KeyType.REGULAR, '['), NarrowerLinesCommand())
        self.register((KeyType.REGULAR, ']'), WiderLinesCommand())
        self.register((KeyType.REGULAR, '{'), ShorterPageCommand())
        self.register((KeyType.REGULAR, '}'), TallerPageCommand())
        self.register((KeyType.REGULAR, 'a'), ToggleAutoWidthCommand())

        # System commands
        self.register((KeyType.CTRL, 'p'), ExportPdfCommand())
        self.register((KeyType.REGULAR, 'q'), QuitCommand())
        self.register((KeyType.CTRL, 'q'), QuitCommand())
        self.register((KeyType.SPECIAL, 'f1'), HelpCommand())
        self.register((KeyType.REGULAR, '?'), HelpCommand())

    def register(self, key: Tuple[KeyType, str], command: ReaderCommand):
        """Register a command for a key combination."""
        self._commands[key] = command

    def get_command(self, key_type: KeyType, value: str) -> Optional[ReaderCommand]:
        """Get the command for a key combination."""
        return self._commands.get((key_type, value))

    def execute(self, reader: 'Reader', key_event: 'KeyEvent') -> bool:
        """Execute the command for the given key event.

        Returns:
            True if the screen needs to be redrawn
        """
        command = self.get_command(key_event.key_type, key_event.value)
        if command:
            return command.execute(reader, key_event)
        return False
