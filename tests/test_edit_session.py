"""
Unit tests for in-place editing
"""

import sys
from pathlib import Path

# Add repo root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from zenfocus.core.storage import MemoryStorage
from zenfocus.ui.view import Role, ViewNode
from zenfocus.apps.tasks.store import TaskStore
from zenfocus.apps.tasks.reconciler import Reconciler, find_part
from zenfocus.apps.tasks.controller import TaskController
from zenfocus.apps.tasks.edit_session import EditState


def make_controller(*texts):
    storage = MemoryStorage()
    store = TaskStore(storage, clock=lambda: 1.0)
    controller = TaskController(store, Reconciler(ViewNode(Role.CONTAINER)))
    controller.start()
    ids = [controller.add(text)['id'] for text in texts]
    return controller, storage, ids


def test_activate_swaps_label_for_focused_field():
    """Activation hides the label and focuses a field seeded with the text"""
    controller, _, (a,) = make_controller("Buy milk")
    item = controller.reconciler.node_for(a)

    session = controller.start_edit(a)

    assert session.state == EditState.EDITING
    assert session.field.parent is item
    assert session.field.get('value') == "Buy milk"
    assert session.field.focused, "Edit field should have focus"
    assert find_part(item, Role.LABEL).get('hidden') is True

    print("✓ Activation shows edit field")


def test_activate_is_idempotent():
    """Activating an item already in edit mode changes nothing"""
    controller, _, (a,) = make_controller("A")
    session = controller.start_edit(a)
    field = session.field

    assert session.activate() is False
    assert controller.start_edit(a) is session
    assert session.field is field
    assert len(controller.reconciler.node_for(a).find_all(Role.EDIT_FIELD)) == 1

    print("✓ Activation idempotent")


def test_enter_commits_trimmed_text():
    """Enter commits a changed, trimmed value"""
    controller, _, (a,) = make_controller("A")
    item = controller.reconciler.node_for(a)
    session = controller.start_edit(a)

    session.set_value("  Buy bread  ")
    session.field.press_key('Enter')

    assert controller.store.get(a)['text'] == "Buy bread"
    assert session.state == EditState.DISPLAY
    assert item.find_all(Role.EDIT_FIELD) == [], "Field should be torn down"
    label = find_part(item, Role.LABEL)
    assert label.get('hidden') is False
    assert label.get('text') == "Buy bread"
    assert a not in controller.sessions
    assert controller.reconciler.node_for(a) is item, "Item node should be reused"

    print("✓ Enter commits edit")


def test_empty_value_on_blur_keeps_text_without_persisting():
    """Blanking the field and losing focus leaves the task untouched"""
    controller, storage, (a,) = make_controller("A")
    writes = storage.write_count
    session = controller.start_edit(a)

    session.set_value("")
    session.field.blur()

    assert controller.store.get(a)['text'] == "A"
    assert storage.write_count == writes, "No persist call should be issued"
    assert session.state == EditState.DISPLAY

    print("✓ Empty edit discarded")


def test_escape_restores_original():
    """Escape resets the value and ends editing without a mutation"""
    controller, storage, (a,) = make_controller("A")
    writes = storage.write_count
    session = controller.start_edit(a)

    session.set_value("Something else")
    session.field.press_key('Escape')

    assert controller.store.get(a)['text'] == "A"
    assert storage.write_count == writes
    assert session.state == EditState.DISPLAY

    print("✓ Escape cancels edit")


def test_blur_after_teardown_is_ignored():
    """A late blur does not commit twice"""
    controller, storage, (a,) = make_controller("A")
    session = controller.start_edit(a)
    session.set_value("B")
    session.on_key('Enter')
    writes = storage.write_count

    session.on_blur()
    session.on_key('Escape')

    assert storage.write_count == writes
    assert controller.store.get(a)['text'] == "B"

    print("✓ Late blur ignored")


def test_detached_field_does_not_commit():
    """A field no longer attached to its item is never committed"""
    controller, _, (a,) = make_controller("A")
    session = controller.start_edit(a)
    session.set_value("Changed")

    # Removing the focused field fires its blur
    session.field.remove()

    assert controller.store.get(a)['text'] == "A", "Stale edit must not be applied"
    assert session.state == EditState.DISPLAY
    assert a not in controller.sessions

    print("✓ Detached field ignored")


def test_item_removed_while_editing():
    """Removing an item mid-edit drops the session without resurrecting it"""
    controller, _, (a, b) = make_controller("A", "B")
    session = controller.start_edit(a)
    session.set_value("Changed")

    controller.remove(a)

    assert controller.store.get(a) is None
    assert controller.store.ids() == [b]
    assert session.state == EditState.DISPLAY
    assert controller.sessions == {}
    assert [n.get('item_id') for n in controller.container.children] == [b]

    print("✓ Removal during edit")


def test_remote_edit_does_not_clobber_field():
    """A text patch from elsewhere leaves the in-progress field value alone"""
    controller, _, (a,) = make_controller("A")
    session = controller.start_edit(a)
    session.set_value("Typing...")

    controller.edit_text(a, "Remote")

    assert session.field.get('value') == "Typing..."
    assert find_part(controller.reconciler.node_for(a), Role.LABEL).get('text') == "Remote"

    session.field.press_key('Escape')
    assert controller.store.get(a)['text'] == "Remote", "Cancelled edit should keep the remote text"

    print("✓ Remote edit keeps field value")


def test_editing_another_item_commits_the_first():
    """Moving focus to a second edit field commits the first one"""
    controller, _, (a, b) = make_controller("A", "B")
    first = controller.start_edit(a)
    first.set_value("A2")

    second = controller.start_edit(b)

    assert controller.store.get(a)['text'] == "A2"
    assert first.state == EditState.DISPLAY
    assert second.state == EditState.EDITING
    assert list(controller.sessions) == [b]

    print("✓ Focus change commits previous edit")


if __name__ == '__main__':
    print("Running edit session tests...\n")

    try:
        test_activate_swaps_label_for_focused_field()
        test_activate_is_idempotent()
        test_enter_commits_trimmed_text()
        test_empty_value_on_blur_keeps_text_without_persisting()
        test_escape_restores_original()
        test_blur_after_teardown_is_ignored()
        test_detached_field_does_not_commit()
        test_item_removed_while_editing()
        test_remote_edit_does_not_clobber_field()
        test_editing_another_item_commits_the_first()

        print("\n" + "="*50)
        print("ALL TESTS PASSED ✓")
        print("="*50)

    except AssertionError as e:
        print(f"\n❌ TEST FAILED: {e}")
        sys.exit(1)
