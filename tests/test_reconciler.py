"""
Unit tests for keyed list reconciliation
"""

import sys
import random
from pathlib import Path

# Add repo root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from zenfocus.ui.view import Role, ViewNode
from zenfocus.apps.tasks.reconciler import Reconciler, find_part


def task(task_id, text=None, completed=False):
    return {'id': task_id, 'text': text or f"task {task_id}", 'completed': completed}


def visible_ids(container):
    return [child.get('item_id') for child in container.children]


def make_reconciler():
    container = ViewNode(Role.CONTAINER)
    return Reconciler(container), container


def test_initial_pass_creates_in_order():
    """First pass creates one node per task in target order"""
    reconciler, container = make_reconciler()

    counts = reconciler.reconcile([task(1), task(2), task(3)])

    assert visible_ids(container) == [1, 2, 3]
    assert counts['created'] == 3 and counts['moved'] == 0
    item = container.children[0]
    assert find_part(item, Role.LABEL).get('text') == "task 1"
    assert find_part(item, Role.DELETE_BUTTON).get('label') == "Delete task: task 1"

    print("✓ Initial pass creates nodes")


def test_unchanged_pass_is_a_no_op():
    """Re-running with identical tasks performs no operations"""
    reconciler, container = make_reconciler()
    tasks = [task(1), task(2)]
    reconciler.reconcile(tasks)

    counts = reconciler.reconcile(tasks)

    assert counts == {'created': 0, 'moved': 0, 'removed': 0, 'patched': 0}, f"Unexpected ops: {counts}"

    print("✓ Unchanged pass does nothing")


def test_toggle_patches_one_attribute():
    """A completion change is one attribute write on the retained node"""
    reconciler, container = make_reconciler()
    reconciler.reconcile([task(1)])
    node = container.children[0]

    counts = reconciler.reconcile([task(1, completed=True)])

    assert counts['patched'] == 1, f"Expected one patch, got {counts['patched']}"
    assert counts['created'] == 0
    assert container.children[0] is node, "Node should not be recreated"
    assert node.get('completed') is True

    print("✓ Toggle patches one attribute")


def test_text_change_updates_label_and_delete_label():
    """Text changes update the label and its derived delete label"""
    reconciler, container = make_reconciler()
    reconciler.reconcile([task(1, "old")])
    node = container.children[0]

    counts = reconciler.reconcile([task(1, "new")])

    assert counts['patched'] == 2
    assert find_part(node, Role.LABEL).get('text') == "new"
    assert find_part(node, Role.DELETE_BUTTON).get('label') == "Delete task: new"

    print("✓ Text change patches label")


def test_remove_middle_keeps_identities():
    """Removing B from [A, B, C] keeps A and C nodes untouched"""
    reconciler, container = make_reconciler()
    reconciler.reconcile([task(1), task(2), task(3)])
    a, c = reconciler.node_for(1), reconciler.node_for(3)

    counts = reconciler.reconcile([task(1), task(3)])

    assert visible_ids(container) == [1, 3]
    assert container.children[0] is a and container.children[1] is c
    assert counts['removed'] == 1
    assert reconciler.node_for(2) is None, "Removed node should leave the table"

    print("✓ Remove keeps identities")


def test_reorder_moves_without_recreating():
    """A changed order is fixed by moves, never by recreation"""
    reconciler, container = make_reconciler()
    reconciler.reconcile([task(1), task(2), task(3)])
    nodes = {i: reconciler.node_for(i) for i in (1, 2, 3)}

    counts = reconciler.reconcile([task(3), task(1), task(2)])

    assert visible_ids(container) == [3, 1, 2]
    assert counts['created'] == 0 and counts['removed'] == 0
    assert counts['moved'] == 1, f"Moving 3 to the front is one move, got {counts['moved']}"
    for i in (1, 2, 3):
        assert reconciler.node_for(i) is nodes[i]

    print("✓ Reorder moves nodes")


def test_new_item_goes_to_tail():
    """Appending a task creates one node at the end"""
    reconciler, container = make_reconciler()
    reconciler.reconcile([task(1), task(2)])

    counts = reconciler.reconcile([task(1), task(2), task(3)])

    assert visible_ids(container) == [1, 2, 3]
    assert counts == {'created': 1, 'moved': 0, 'removed': 0, 'patched': 0}

    print("✓ New item appended")


def test_empty_target_clears_everything():
    """An empty task list clears the container and table in one step"""
    reconciler, container = make_reconciler()
    reconciler.reconcile([task(1), task(2)])

    counts = reconciler.reconcile([])

    assert container.children == []
    assert len(reconciler) == 0
    assert counts['removed'] == 2

    print("✓ Empty target clears view")


def test_random_sequences_match_target():
    """Visible ids always equal target ids and survivors keep their node"""
    rng = random.Random(42)
    reconciler, container = make_reconciler()
    current = []
    next_id = 1

    for _ in range(200):
        op = rng.choice(['add', 'add', 'remove', 'toggle', 'shuffle'])
        if op == 'add':
            current.append(task(next_id))
            next_id += 1
        elif op == 'remove' and current:
            current.pop(rng.randrange(len(current)))
        elif op == 'toggle' and current:
            picked = rng.randrange(len(current))
            current[picked] = dict(current[picked], completed=not current[picked]['completed'])
        elif op == 'shuffle':
            rng.shuffle(current)

        before = {t['id']: reconciler.node_for(t['id']) for t in current}
        reconciler.reconcile(current)

        assert visible_ids(container) == [t['id'] for t in current]
        assert len(reconciler) == len(current)
        for task_id, node in before.items():
            if node is not None:
                assert reconciler.node_for(task_id) is node, f"Node for {task_id} was replaced"

    print("✓ Random sequences reconcile correctly")


def test_stats_accumulate():
    """Cumulative stats track every pass"""
    reconciler, _ = make_reconciler()
    reconciler.reconcile([task(1)])
    reconciler.reconcile([])

    assert reconciler.stats['passes'] == 2
    assert reconciler.stats['created'] == 1
    assert reconciler.stats['removed'] == 1

    reconciler.reset_stats()
    assert reconciler.stats['passes'] == 0

    print("✓ Stats accumulate")


if __name__ == '__main__':
    print("Running reconciler tests...\n")

    try:
        test_initial_pass_creates_in_order()
        test_unchanged_pass_is_a_no_op()
        test_toggle_patches_one_attribute()
        test_text_change_updates_label_and_delete_label()
        test_remove_middle_keeps_identities()
        test_reorder_moves_without_recreating()
        test_new_item_goes_to_tail()
        test_empty_target_clears_everything()
        test_random_sequences_match_target()
        test_stats_accumulate()

        print("\n" + "="*50)
        print("ALL TESTS PASSED ✓")
        print("="*50)

    except AssertionError as e:
        print(f"\n❌ TEST FAILED: {e}")
        sys.exit(1)
