"""
Task list screen.
Draws the retained view tree with Pillow.
"""

from PIL import Image, ImageDraw, ImageFont
from typing import List, Optional
import logging

from zenfocus.ui.view import Role, ViewNode
from zenfocus.apps.tasks.reconciler import find_part


FONT_REGULAR = "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf"
FONT_BOLD = "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf"

TOAST_COLORS = {
    'info': '#3b6ea5',
    'success': '#3c8d40',
    'warning': '#b7791f',
    'error': '#b83232',
}


class TaskScreen:
    """
    To-do list screen rendered from the list container
    """

    def __init__(self, width: int = 800, height: int = 480, font_size: int = 22, notifications=None):
        """
        Initialize task screen

        Args:
            width: Screen width
            height: Screen height
            font_size: Item font size
            notifications: Optional NotificationCenter for toasts
        """
        self.width = width
        self.height = height
        self.font_size = font_size
        self.notifications = notifications
        self.logger = logging.getLogger(__name__)

        try:
            self.item_font = ImageFont.truetype(FONT_REGULAR, font_size)
            self.title_font = ImageFont.truetype(FONT_BOLD, 28)
            self.small_font = ImageFont.truetype(FONT_REGULAR, 16)
        except OSError:
            self.logger.warning("TrueType fonts not found, using default")
            self.item_font = ImageFont.load_default()
            self.title_font = ImageFont.load_default()
            self.small_font = ImageFont.load_default()

    def _text_width(self, draw: ImageDraw.ImageDraw, text: str, font) -> int:
        bbox = draw.textbbox((0, 0), text, font=font)
        return bbox[2] - bbox[0]

    def _wrap_text(self, draw: ImageDraw.ImageDraw, text: str, max_width: int, max_lines: int = 3) -> List[str]:
        """
        Word-wrap text to a pixel width

        Args:
            draw: ImageDraw used for measuring
            text: Text to wrap
            max_width: Available width in pixels
            max_lines: Maximum number of lines, the last one gets an ellipsis when cut

        Returns:
            Wrapped lines
        """
        lines = []
        current_line: List[str] = []

        for word in text.split():
            test_line = ' '.join(current_line + [word])
            if self._text_width(draw, test_line, self.item_font) <= max_width:
                current_line.append(word)
                continue

            if current_line:
                lines.append(' '.join(current_line))
                current_line = [word]
            else:
                # Single word wider than the line, cut it down
                truncated = word
                while truncated and self._text_width(draw, truncated + "...", self.item_font) > max_width:
                    truncated = truncated[:-1]
                lines.append(truncated + "...")
                current_line = []

            if len(lines) >= max_lines:
                current_line = []
                break

        if current_line and len(lines) < max_lines:
            lines.append(' '.join(current_line))

        if len(lines) == max_lines and len(' '.join(lines).split()) < len(text.split()):
            if not lines[-1].endswith("..."):
                lines[-1] = lines[-1] + "..."

        return lines

    def render(self, container: ViewNode, input_field: Optional[ViewNode] = None) -> Image.Image:
        """
        Render the task list

        Args:
            container: List container maintained by the Reconciler
            input_field: Optional new-task input to draw above the list

        Returns:
            PIL Image of the screen
        """
        image = Image.new('RGB', (self.width, self.height), 'white')
        draw = ImageDraw.Draw(image)

        y_offset = 10
        title = "Tasks"
        title_width = self._text_width(draw, title, self.title_font)
        draw.text(((self.width - title_width) // 2, y_offset), title, fill='black', font=self.title_font)
        y_offset += 40

        if input_field is not None:
            value = input_field.get('value', '')
            draw.rectangle([(10, y_offset), (self.width - 10, y_offset + 32)], outline='gray', width=1)
            placeholder = value or "Add a new task..."
            draw.text((18, y_offset + 4), placeholder, fill='black' if value else 'gray', font=self.item_font)
            y_offset += 42

        draw.line([(10, y_offset), (self.width - 10, y_offset)], fill='black', width=2)
        y_offset += 10

        items = [child for child in container.children if child.role == Role.ITEM]
        focused = container.focused_node()

        if not items:
            msg = "No tasks yet"
            msg_width = self._text_width(draw, msg, self.item_font)
            draw.text(((self.width - msg_width) // 2, self.height // 2), msg, fill='gray', font=self.item_font)
        else:
            bottom_limit = self.height - 60
            for index, item in enumerate(items):
                if y_offset > bottom_limit:
                    more = f"+{len(items) - index} more"
                    draw.text((20, bottom_limit + 10), more, fill='gray', font=self.small_font)
                    break
                y_offset = self._draw_item(draw, item, y_offset, focused)

        self._draw_toasts(draw)
        return image

    def _draw_item(self, draw: ImageDraw.ImageDraw, item: ViewNode, y_offset: int, focused: Optional[ViewNode]) -> int:
        line_height = 34
        checkbox_x = 20
        checkbox_size = 20
        text_x = checkbox_x + checkbox_size + 12
        max_width = self.width - text_x - 50
        completed = bool(item.get('completed'))

        field = find_part(item, Role.EDIT_FIELD)
        label = find_part(item, Role.LABEL)

        if field is not None:
            lines = [field.get('value', '')]
        elif label is not None:
            lines = self._wrap_text(draw, label.get('text', ''), max_width)
        else:
            lines = []
        block_height = max(line_height, len(lines) * line_height)

        if focused is not None and item.contains(focused):
            draw.rectangle([(10, y_offset - 2), (self.width - 10, y_offset + block_height - 4)], fill='lightgray')

        checkbox_y = y_offset + 4
        draw.rectangle(
            [(checkbox_x, checkbox_y), (checkbox_x + checkbox_size, checkbox_y + checkbox_size)],
            outline='black',
            width=2
        )
        if completed:
            draw.line([(checkbox_x + 4, checkbox_y + 4), (checkbox_x + checkbox_size - 4, checkbox_y + checkbox_size - 4)], fill='black', width=3)
            draw.line([(checkbox_x + checkbox_size - 4, checkbox_y + 4), (checkbox_x + 4, checkbox_y + checkbox_size - 4)], fill='black', width=3)

        if field is not None:
            value = lines[0]
            draw.rectangle([(text_x - 4, y_offset), (self.width - 50, y_offset + line_height - 4)], outline='black', width=2)
            draw.text((text_x, y_offset + 2), value, fill='black', font=self.item_font)
            cursor_x = text_x + self._text_width(draw, value, self.item_font) + 2
            draw.line([(cursor_x, y_offset + 4), (cursor_x, y_offset + line_height - 8)], fill='black', width=1)
        else:
            current_y = y_offset
            for line_text in lines:
                draw.text((text_x, current_y), line_text, fill='gray' if completed else 'black', font=self.item_font)
                if completed:
                    bbox = draw.textbbox((text_x, current_y), line_text, font=self.item_font)
                    strike_y = (bbox[1] + bbox[3]) // 2
                    draw.line([(text_x, strike_y), (bbox[2], strike_y)], fill='black', width=2)
                current_y += line_height

        button = find_part(item, Role.DELETE_BUTTON)
        if button is not None:
            draw.text((self.width - 40, y_offset), button.get('text', ''), fill='black', font=self.item_font)

        return y_offset + block_height

    def _draw_toasts(self, draw: ImageDraw.ImageDraw):
        if not self.notifications:
            return

        y = self.height - 10
        for toast in reversed(self.notifications.pending()):
            text = toast['message']
            text_width = self._text_width(draw, text, self.small_font)
            y -= 30
            x = self.width - text_width - 30
            draw.rectangle([(x - 10, y), (self.width - 10, y + 26)], fill=TOAST_COLORS.get(toast['kind'], 'black'))
            draw.text((x, y + 4), text, fill='white', font=self.small_font)
