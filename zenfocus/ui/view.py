"""
Retained view tree.
Nodes carry a structural role, a dict of attributes, ordered children,
focus and bubbling event dispatch. Screens render from this tree.
"""

from enum import Enum
from typing import Any, Callable, Dict, List, Optional


class Role(Enum):
    """Structural role assigned to a node when it is created"""
    CONTAINER = "container"
    ITEM = "item"
    LABEL = "label"
    DELETE_BUTTON = "delete_button"
    EDIT_FIELD = "edit_field"
    INPUT = "input"
    BUTTON = "button"


class ViewEvent:
    """
    Event dispatched through the tree
    """

    def __init__(self, type: str, target: 'ViewNode', key: Optional[str] = None, bubbles: bool = True):
        self.type = type
        self.target = target
        self.key = key
        self.bubbles = bubbles
        self.current_target: Optional['ViewNode'] = None
        self.stopped = False
        self.default_prevented = False

    def stop_propagation(self):
        self.stopped = True

    def prevent_default(self):
        self.default_prevented = True


class ViewNode:
    """
    One node of the retained view tree
    """

    def __init__(self, role: Role, **attrs: Any):
        """
        Create a detached node

        Args:
            role: Structural role
            **attrs: Initial attributes (text, value, completed, ...)
        """
        self.role = role
        self.attrs: Dict[str, Any] = dict(attrs)
        self.children: List['ViewNode'] = []
        self.parent: Optional['ViewNode'] = None
        self.listeners: Dict[str, List[Callable[[ViewEvent], None]]] = {}
        self.patch_count = 0

        # Only meaningful on a root node
        self._focused: Optional['ViewNode'] = None

    def __repr__(self) -> str:
        return f"<ViewNode {self.role.value} {self.attrs}>"

    # Attributes

    def get(self, name: str, default: Any = None) -> Any:
        return self.attrs.get(name, default)

    def set(self, name: str, value: Any):
        """Set an attribute, counting the write as one patch"""
        self.attrs[name] = value
        self.patch_count += 1

    # Structure

    def root(self) -> 'ViewNode':
        node = self
        while node.parent is not None:
            node = node.parent
        return node

    def contains(self, other: Optional['ViewNode']) -> bool:
        node = other
        while node is not None:
            if node is self:
                return True
            node = node.parent
        return False

    def child_at(self, index: int) -> Optional['ViewNode']:
        if 0 <= index < len(self.children):
            return self.children[index]
        return None

    def append_child(self, child: 'ViewNode') -> 'ViewNode':
        """Append a node, moving it if it is already attached somewhere"""
        if child.parent is not None:
            child.parent._detach(child, moving=True)
        child.parent = self
        self.children.append(child)
        return child

    def insert_before(self, child: 'ViewNode', reference: Optional['ViewNode']) -> 'ViewNode':
        """
        Insert a node before a reference child (append if reference is None)

        Args:
            child: Node to insert or move
            reference: Existing child of this node
        """
        if reference is None:
            return self.append_child(child)
        if reference.parent is not self:
            raise ValueError("Reference node is not a child of this node")
        if child is reference:
            return child

        if child.parent is not None:
            child.parent._detach(child, moving=True)
        child.parent = self
        self.children.insert(self.children.index(reference), child)
        return child

    def remove_child(self, child: 'ViewNode') -> 'ViewNode':
        if child.parent is not self:
            raise ValueError("Node is not a child of this node")
        self._detach(child, moving=False)
        return child

    def remove(self):
        """Detach this node from its parent, if any"""
        if self.parent is not None:
            self.parent.remove_child(self)

    def clear_children(self):
        """Detach every child in one step"""
        for child in list(self.children):
            self._detach(child, moving=False)

    def _detach(self, child: 'ViewNode', moving: bool):
        root = self.root()
        focused = root._focused
        lost_focus = focused is not None and child.contains(focused) and not moving

        self.children.remove(child)
        child.parent = None

        if lost_focus:
            root._focused = None
            focused.dispatch(ViewEvent('blur', focused, bubbles=False))

    def closest(self, role: Role) -> Optional['ViewNode']:
        """Nearest node with the given role, starting at this node and walking up"""
        node = self
        while node is not None:
            if node.role == role:
                return node
            node = node.parent
        return None

    def find_all(self, role: Role) -> List['ViewNode']:
        found = []
        for child in self.children:
            if child.role == role:
                found.append(child)
            found.extend(child.find_all(role))
        return found

    # Focus

    @property
    def focused(self) -> bool:
        return self.root()._focused is self

    def focused_node(self) -> Optional['ViewNode']:
        return self.root()._focused

    def focus(self):
        """Focus this node, blurring whichever node in the same tree had focus"""
        root = self.root()
        previous = root._focused
        if previous is self:
            return
        root._focused = self
        if previous is not None:
            previous.dispatch(ViewEvent('blur', previous, bubbles=False))

    def blur(self):
        root = self.root()
        if root._focused is self:
            root._focused = None
            self.dispatch(ViewEvent('blur', self, bubbles=False))

    # Events

    def add_listener(self, event_type: str, handler: Callable[[ViewEvent], None]):
        self.listeners.setdefault(event_type, []).append(handler)

    def remove_listener(self, event_type: str, handler: Callable[[ViewEvent], None]):
        handlers = self.listeners.get(event_type, [])
        if handler in handlers:
            handlers.remove(handler)

    def dispatch(self, event: ViewEvent) -> ViewEvent:
        """
        Deliver an event to this node and, for bubbling events, its ancestors

        Returns:
            The event, after delivery
        """
        node = self
        while node is not None and not event.stopped:
            event.current_target = node
            for handler in list(node.listeners.get(event.type, [])):
                handler(event)
            if not event.bubbles:
                break
            node = node.parent
        return event

    # Convenience for input simulation

    def click(self) -> ViewEvent:
        return self.dispatch(ViewEvent('click', self))

    def double_click(self) -> ViewEvent:
        return self.dispatch(ViewEvent('dblclick', self))

    def press_key(self, key: str) -> ViewEvent:
        return self.dispatch(ViewEvent('keydown', self, key=key))


def visible_text(node: ViewNode) -> List[str]:
    """Flatten the visible text of a subtree, for logging and tests"""
    if node.get('hidden'):
        return []
    lines = []
    if node.role == Role.EDIT_FIELD:
        lines.append(node.get('value', ''))
    elif node.get('text') is not None:
        lines.append(node.get('text'))
    for child in node.children:
        lines.extend(visible_text(child))
    return lines
