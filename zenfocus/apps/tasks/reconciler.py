"""
Keyed list reconciliation.
Keeps the container's item nodes in step with the task list while reusing
every node whose task survives, so focus and edit state are not lost.
"""

from typing import Any, Dict, List, Optional
import logging

from zenfocus.ui.view import Role, ViewNode


DELETE_GLYPH = '×'


def delete_label(text: str) -> str:
    """Accessible label of an item's delete button"""
    return f"Delete task: {text}"


def find_part(item: ViewNode, role: Role) -> Optional[ViewNode]:
    """Direct child of an item node with the given role"""
    for child in item.children:
        if child.role == role:
            return child
    return None


class Reconciler:
    """
    Owns the id -> node table of one list container
    """

    def __init__(self, container: ViewNode):
        """
        Initialize reconciler

        Args:
            container: List container node the items are placed in
        """
        self.logger = logging.getLogger(__name__)
        self.container = container
        self.nodes: Dict[int, ViewNode] = {}
        self.stats = {'created': 0, 'moved': 0, 'removed': 0, 'patched': 0, 'passes': 0}

    def node_for(self, task_id: int) -> Optional[ViewNode]:
        """Retained node of a task, if it is on screen"""
        return self.nodes.get(task_id)

    def reconcile(self, tasks: List[Dict[str, Any]]) -> Dict[str, int]:
        """
        Bring the container in line with the ordered task list

        Args:
            tasks: Target tasks in display order

        Returns:
            Operation counts for this pass
        """
        counts = {'created': 0, 'moved': 0, 'removed': 0, 'patched': 0}

        if not tasks:
            counts['removed'] = len(self.nodes)
            self.container.clear_children()
            self.nodes.clear()
            self._record(counts)
            return counts

        for index, task in enumerate(tasks):
            node = self.nodes.get(task['id'])
            if node is not None:
                counts['patched'] += self._patch(node, task)
                created = False
            else:
                node = self._create(task)
                self.nodes[task['id']] = node
                counts['created'] += 1
                created = True

            current = self.container.child_at(index)
            if current is not node:
                # Appends when index is past the end
                self.container.insert_before(node, current)
                if not created:
                    counts['moved'] += 1

        # Sweep only after placement so moved nodes are never taken for stale ones
        target_ids = {task['id'] for task in tasks}
        for task_id in [i for i in self.nodes if i not in target_ids]:
            node = self.nodes.pop(task_id)
            node.remove()
            counts['removed'] += 1

        self._record(counts)
        return counts

    def _record(self, counts: Dict[str, int]):
        for key, value in counts.items():
            self.stats[key] += value
        self.stats['passes'] += 1
        self.logger.debug(
            f"Reconciled {len(self.nodes)} items: {counts['created']} created, "
            f"{counts['moved']} moved, {counts['removed']} removed, {counts['patched']} patched"
        )

    def _create(self, task: Dict[str, Any]) -> ViewNode:
        item = ViewNode(Role.ITEM, item_id=task['id'], completed=task['completed'])
        item.append_child(ViewNode(Role.LABEL, text=task['text'], focusable=True))
        item.append_child(ViewNode(Role.DELETE_BUTTON, text=DELETE_GLYPH, label=delete_label(task['text'])))
        return item

    def _patch(self, item: ViewNode, task: Dict[str, Any]) -> int:
        """
        Write only the attributes whose value changed

        Returns:
            Number of attribute writes
        """
        writes = 0

        if item.get('completed') != task['completed']:
            item.set('completed', task['completed'])
            writes += 1

        label = find_part(item, Role.LABEL)
        if label is not None and label.get('text') != task['text']:
            label.set('text', task['text'])
            writes += 1

            button = find_part(item, Role.DELETE_BUTTON)
            if button is not None:
                button.set('label', delete_label(task['text']))
                writes += 1

        return writes

    def reset_stats(self):
        for key in self.stats:
            self.stats[key] = 0
        self.logger.debug("Reconciler statistics reset")

    def __len__(self) -> int:
        return len(self.nodes)
