"""
Task List API Routes

Flask Blueprint exposing the task intents over HTTP, plus a remote
keyboard and pointer that feed events into the task view.
"""

import io
import logging
from flask import Blueprint, current_app, jsonify, request, send_file

from zenfocus.ui.view import Role
from zenfocus.apps.tasks.reconciler import find_part

# Create Blueprint
tasks_bp = Blueprint('tasks', __name__)
logger = logging.getLogger(__name__)

# Pointer gestures the remote can send to a task item
ITEM_GESTURES = ('click', 'dblclick', 'focus', 'delete')


def init_routes(flask_app, controller, notifications=None, screen=None):
    """
    Attach the task components to a Flask app and register the blueprint

    Args:
        flask_app: Flask application
        controller: TaskController instance
        notifications: Optional NotificationCenter
        screen: Optional TaskScreen for /screen.png
    """
    flask_app.config['TASK_CONTROLLER'] = controller
    flask_app.config['TASK_NOTIFICATIONS'] = notifications
    flask_app.config['TASK_SCREEN'] = screen
    flask_app.register_blueprint(tasks_bp)
    logger.info("Initialized task routes")


def _controller():
    return current_app.config['TASK_CONTROLLER']


def _request_text() -> str:
    data = request.get_json(silent=True) or {}
    text = data.get('text', '')
    return text.strip() if isinstance(text, str) else ''


@tasks_bp.route('/api/tasks', methods=['GET'])
def list_tasks():
    """Get all tasks in list order"""
    return jsonify({'tasks': _controller().store.tasks})


@tasks_bp.route('/api/tasks', methods=['POST'])
def add_task():
    """Add a new task"""
    try:
        text = _request_text()
        if not text:
            return jsonify({'error': 'Task text is required'}), 400

        task = _controller().add(text)
        return jsonify({'success': True, 'task': task}), 201

    except Exception as e:
        logger.error(f"Failed to add task: {e}", exc_info=True)
        return jsonify({'error': str(e)}), 500


@tasks_bp.route('/api/tasks/<int:task_id>', methods=['PUT'])
def toggle_task(task_id):
    """Toggle task completion status"""
    try:
        task = _controller().toggle(task_id)
        if task is None:
            return jsonify({'error': 'Task not found'}), 404
        return jsonify({'success': True, 'task': task})

    except Exception as e:
        logger.error(f"Failed to toggle task: {e}", exc_info=True)
        return jsonify({'error': str(e)}), 500


@tasks_bp.route('/api/tasks/<int:task_id>', methods=['PATCH'])
def edit_task(task_id):
    """Edit task text"""
    try:
        text = _request_text()
        if not text:
            return jsonify({'error': 'Task text is required'}), 400

        controller = _controller()
        if controller.store.get(task_id) is None:
            return jsonify({'error': 'Task not found'}), 404

        controller.edit_text(task_id, text)
        return jsonify({'success': True, 'task': controller.store.get(task_id)})

    except Exception as e:
        logger.error(f"Failed to edit task: {e}", exc_info=True)
        return jsonify({'error': str(e)}), 500


@tasks_bp.route('/api/tasks/<int:task_id>', methods=['DELETE'])
def delete_task(task_id):
    """Delete a task"""
    try:
        if _controller().remove(task_id):
            return jsonify({'success': True})
        return jsonify({'error': 'Task not found'}), 404

    except Exception as e:
        logger.error(f"Failed to delete task: {e}", exc_info=True)
        return jsonify({'error': str(e)}), 500


# View events (remote keyboard and pointer)

def _view_state(controller):
    node = controller.focused_node()
    focused = None
    if node is not None:
        item = node.closest(Role.ITEM)
        focused = {
            'role': node.role.value,
            'item_id': item.get('item_id') if item is not None else None,
            'value': node.get('value'),
        }
    return {
        'tasks': controller.store.tasks,
        'editing': sorted(controller.sessions),
        'focused': focused,
    }


@tasks_bp.route('/api/view', methods=['GET'])
def view_state():
    """Focus and edit state of the task view"""
    controller = _controller()
    with controller.lock:
        return jsonify(_view_state(controller))


@tasks_bp.route('/api/view/items/<int:task_id>/<gesture>', methods=['POST'])
def item_gesture(task_id, gesture):
    """
    Send a pointer gesture to a task item

    click and dblclick land on the label, delete clicks the delete button,
    focus only moves key focus to the label. The target is focused first,
    like a pointer press, so an open edit field commits before the gesture.
    """
    if gesture not in ITEM_GESTURES:
        return jsonify({'error': f'Unknown gesture: {gesture}'}), 400

    try:
        controller = _controller()
        with controller.lock:
            item = controller.reconciler.node_for(task_id)
            if item is None:
                return jsonify({'error': 'Task not found'}), 404

            target = find_part(item, Role.DELETE_BUTTON if gesture == 'delete' else Role.LABEL)
            controller.focus(target)
            if gesture == 'dblclick':
                target.double_click()
            elif gesture != 'focus':
                target.click()

            return jsonify(_view_state(controller))

    except Exception as e:
        logger.error(f"Failed to send {gesture} to task {task_id}: {e}", exc_info=True)
        return jsonify({'error': str(e)}), 500


@tasks_bp.route('/api/view/input/focus', methods=['POST'])
def focus_input():
    """Move key focus to the new-task input"""
    controller = _controller()
    if controller.input_field is None:
        return jsonify({'error': 'Input not available'}), 404

    with controller.lock:
        controller.focus(controller.input_field)
        return jsonify(_view_state(controller))


@tasks_bp.route('/api/view/focused/key', methods=['POST'])
def focused_key():
    """Press a key on the focused node (Enter, Escape, space, ...)"""
    data = request.get_json(silent=True) or {}
    key = data.get('key')
    if not isinstance(key, str) or not key:
        return jsonify({'error': 'Key is required'}), 400

    try:
        controller = _controller()
        with controller.lock:
            node = controller.focused_node()
            if node is None:
                return jsonify({'error': 'Nothing is focused'}), 409

            node.press_key(key)
            return jsonify(_view_state(controller))

    except Exception as e:
        logger.error(f"Failed to press {key!r}: {e}", exc_info=True)
        return jsonify({'error': str(e)}), 500


@tasks_bp.route('/api/view/focused/value', methods=['POST'])
def focused_value():
    """Replace the text of the focused input or edit field (typing)"""
    data = request.get_json(silent=True) or {}
    value = data.get('value')
    if not isinstance(value, str):
        return jsonify({'error': 'Value must be a string'}), 400

    controller = _controller()
    with controller.lock:
        node = controller.focused_node()
        if node is None or node.role not in (Role.INPUT, Role.EDIT_FIELD):
            return jsonify({'error': 'No text field is focused'}), 409

        node.set('value', value)
        return jsonify(_view_state(controller))


@tasks_bp.route('/api/notifications', methods=['GET'])
def list_notifications():
    """Pending toast notifications"""
    notifications = current_app.config.get('TASK_NOTIFICATIONS')
    return jsonify({'notifications': notifications.pending() if notifications else []})


@tasks_bp.route('/api/notifications/<int:toast_id>', methods=['DELETE'])
def dismiss_notification(toast_id):
    """Dismiss a toast"""
    notifications = current_app.config.get('TASK_NOTIFICATIONS')
    if notifications and notifications.dismiss(toast_id):
        return jsonify({'success': True})
    return jsonify({'error': 'Notification not found'}), 404


@tasks_bp.route('/screen.png', methods=['GET'])
def screen_image():
    """Current task screen as PNG"""
    screen = current_app.config.get('TASK_SCREEN')
    if screen is None:
        return jsonify({'error': 'Screen not available'}), 404

    controller = _controller()
    with controller.lock:
        image = screen.render(controller.container, controller.input_field)
    buffer = io.BytesIO()
    image.save(buffer, format='PNG')
    buffer.seek(0)
    return send_file(buffer, mimetype='image/png')
