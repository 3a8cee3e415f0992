"""
Flask web server for the ZenFocus task list.
Provides web interface for:
- Viewing the rendered task screen
- Adding, toggling, editing and deleting tasks remotely
- Remote keys and typing routed to the focused node on screen
"""

from flask import Flask, render_template_string
import logging
import threading

from zenfocus.apps.tasks.routes import init_routes


class TasksWebServer:
    """
    Web server for remote task management
    """

    def __init__(self, controller, notifications=None, screen=None, host: str = '0.0.0.0', port: int = 5000):
        """
        Initialize web server

        Args:
            controller: TaskController handling every mutation
            notifications: Optional NotificationCenter
            screen: Optional TaskScreen for the screen preview
            host: Interface to bind
            port: Port to run server on
        """
        self.logger = logging.getLogger(__name__)
        self.controller = controller
        self.host = host
        self.port = port
        self.flask_app = Flask(__name__)
        self.flask_app.config['MAX_CONTENT_LENGTH'] = 64 * 1024  # Task text only

        init_routes(self.flask_app, controller, notifications=notifications, screen=screen)
        self._setup_routes()

    def _setup_routes(self):
        """Setup Flask routes"""

        @self.flask_app.route('/')
        def index():
            """Main page with the task list"""
            return render_template_string(HTML_TEMPLATE, tasks=self.controller.store.tasks)

    def run(self):
        """Start the web server in a separate thread"""
        thread = threading.Thread(target=self._run_server, daemon=True)
        thread.start()
        self.logger.info(f"Web server started on port {self.port}")

    def _run_server(self):
        """Internal method to run Flask server"""
        self.flask_app.run(host=self.host, port=self.port, debug=False, use_reloader=False)


# HTML Template for the web interface
HTML_TEMPLATE = '''
<!DOCTYPE html>
<html>
<head>
    <title>ZenFocus Tasks</title>
    <meta name="viewport" content="width=device-width, initial-scale=1">
    <style>
        body {
            font-family: Arial, sans-serif;
            max-width: 800px;
            margin: 0 auto;
            padding: 20px;
            background: #f5f5f5;
        }
        h1, h2 {
            color: #333;
        }
        .section {
            background: white;
            padding: 20px;
            margin: 20px 0;
            border-radius: 8px;
            box-shadow: 0 2px 4px rgba(0,0,0,0.1);
        }
        ul {
            list-style: none;
            padding: 0;
        }
        li {
            display: flex;
            align-items: center;
            gap: 10px;
            padding: 8px 0;
            border-bottom: 1px solid #eee;
        }
        li.completed span {
            text-decoration: line-through;
            color: #888;
        }
        li span {
            flex: 1;
            cursor: pointer;
        }
        button {
            padding: 6px 12px;
            border: none;
            border-radius: 4px;
            background: #4CAF50;
            color: white;
            cursor: pointer;
        }
        button.delete {
            background: #f44336;
        }
        input[type=text] {
            flex: 1;
            padding: 8px;
        }
        .add-row {
            display: flex;
            gap: 10px;
        }
        img {
            max-width: 100%;
            border: 1px solid #ccc;
        }
    </style>
</head>
<body>
    <h1>ZenFocus Tasks</h1>

    <div class="section">
        <div class="add-row">
            <input type="text" id="new-task" placeholder="Add a new task..."
                   onkeydown="if (event.key === 'Enter') addTask()">
            <button onclick="addTask()">Add</button>
        </div>
        <ul>
        {% for task in tasks %}
            <li class="{{ 'completed' if task.completed else '' }}">
                <span onclick="toggleTask({{ task.id }})" ondblclick="editTask({{ task.id }}, this.textContent)">{{ task.text }}</span>
                <button class="delete" aria-label="Delete task: {{ task.text }}" onclick="deleteTask({{ task.id }})">&times;</button>
            </li>
        {% else %}
            <li>No tasks yet</li>
        {% endfor %}
        </ul>
    </div>

    <div class="section">
        <h2>Screen</h2>
        <img id="screen" src="/screen.png" alt="Task screen">
    </div>

    <div class="section">
        <h2>Remote Keys</h2>
        <p>Keys and typing go to whatever is focused on the screen.</p>
        <div class="add-row">
            <input type="text" id="remote-text" placeholder="Type into focused field...">
            <button onclick="typeText()">Type</button>
        </div>
        <p>
            <button onclick="send('POST', '/api/view/input/focus')">Focus Input</button>
            <button onclick="pressKey('Enter')">Enter</button>
            <button onclick="pressKey(' ')">Space</button>
            <button onclick="pressKey('Escape')">Escape</button>
        </p>
    </div>

    <script>
        function send(method, url, body) {
            return fetch(url, {
                method: method,
                headers: {'Content-Type': 'application/json'},
                body: body ? JSON.stringify(body) : undefined
            }).then(() => location.reload());
        }
        function addTask() {
            const input = document.getElementById('new-task');
            if (input.value.trim()) send('POST', '/api/tasks', {text: input.value});
        }
        function toggleTask(id) { send('PUT', '/api/tasks/' + id); }
        function deleteTask(id) { send('DELETE', '/api/tasks/' + id); }
        function editTask(id, text) {
            const value = prompt('Edit task', text);
            if (value !== null && value.trim()) send('PATCH', '/api/tasks/' + id, {text: value});
        }
        function pressKey(key) { send('POST', '/api/view/focused/key', {key: key}); }
        function typeText() {
            send('POST', '/api/view/focused/value', {value: document.getElementById('remote-text').value});
        }
    </script>
</body>
</html>
'''
