"""
Overlay markup templates: styles, client toggle script, indicator and panels.
"""

STYLES = '''
<style>
    :root {
        --color-error: hsl(354, 70.5%, 53.5%);
        --color-warning: hsl(45, 100%, 51.4%);
        --color-notice: hsl(190, 89.7%, 49.6%);
        --color-dumps: hsl(300, 50%, 50%);
        --text-light: #fff;
        --text-dark: #000;
        --bg-light: hsl(0, 0%, 90.6%);
        --bg-dark: hsl(250, 5.5%, 21.6%);
    }

    #debug-errors .debug-counter { display: inline-block; padding: 0 5px; margin-left: 5px; cursor: pointer; }
    #debug-errors .debug-counter.error { background: var(--color-error); color: var(--text-light); }
    #debug-errors .debug-counter.warning { background: var(--color-warning); color: var(--text-dark); }
    #debug-errors .debug-counter.notice { background: var(--color-notice); color: var(--text-dark); }
    #debug-errors .debug-counter.dumps { background: var(--color-dumps); color: var(--text-light); }

    #debug-container {
        position: fixed;
        top: 32px;
        right: 10px;
        width: 400px;
        max-height: calc(100vh - 32px);
        overflow-y: auto;
        z-index: 99999;
        display: none;
    }

    .debug-panel { margin-bottom: 10px; padding: 10px; background: var(--bg-dark); border-left: 4px solid; }
    .debug-panel.errors { border-color: var(--color-error); }
    .debug-panel.warnings { border-color: var(--color-warning); }
    .debug-panel.notices { border-color: var(--color-notice); }
    .debug-panel.dumps { border-color: var(--color-dumps); }

    .debug-item { padding: 15px; margin-bottom: 10px; background-color: var(--bg-dark); border-bottom: 1px solid #eee; }
    .debug-item:last-child { border-bottom: none; }

    .debug-indicator { display: inline-block; width: 12px; height: 12px; border-radius: 50%; margin-right: 5px; }
    .debug-panel.errors .debug-indicator { background: var(--color-error); }
    .debug-panel.warnings .debug-indicator { background: var(--color-warning); }
    .debug-panel.notices .debug-indicator { background: var(--color-notice); }
    .debug-panel.dumps .debug-indicator { background: var(--color-dumps); }

    .debug-item .timestamp { color: var(--text-light); font-size: 12px; }
    .debug-item .message {
        font-family: monospace;
        white-space: pre-wrap;
        margin: 5px 0;
        font-weight: bold;
        background: var(--bg-light);
        border-radius: 8px;
        padding: 10px;
    }
    .debug-item .details {
        color: var(--text-light);
        background: var(--bg-dark);
        font-size: 12px;
        margin-top: 5px;
        padding: 10px;
        border-radius: 3px;
        white-space: normal;
    }

    @media screen and (max-width: 1680px) {
        #debug-container { width: 33vw; right: 10px; }
    }
    @media screen and (max-width: 782px) {
        #debug-container { top: 46px; width: 100%; right: 0 !important; left: 0; }
    }
</style>
'''

# Keep the toggle logic in step with render.visibility.PanelVisibility,
# which models the same state machine and is what the tests exercise.
SCRIPTS = '''
<script>
document.addEventListener('DOMContentLoaded', () => {
    const isHidden = (el) => el.style.display === 'none';

    window.toggleAllErrorPanels = () => {
        const container = document.getElementById('debug-container');
        if (!container) return;
        if (container.style.display === 'none' || container.style.display === '') {
            container.style.display = 'block';
            container.querySelectorAll('.debug-panel').forEach(panel => panel.style.display = 'block');
        } else {
            container.style.display = 'none';
        }
    };

    // Switch between "only this category" and "every category".
    window.toggleErrorPanel = (type) => {
        const container = document.getElementById('debug-container');
        if (!container) return;
        const panels = container.querySelectorAll('.debug-panel');
        const target = container.querySelector('.debug-panel.' + type);
        if (!target) return;

        let onlyTargetVisible = true;
        panels.forEach(panel => {
            if (panel !== target && !isHidden(panel)) {
                onlyTargetVisible = false;
            }
        });

        if (!onlyTargetVisible) {
            panels.forEach(panel => panel.style.display = 'none');
            target.style.display = 'block';
        } else {
            panels.forEach(panel => panel.style.display = 'block');
        }
    };
});
</script>
'''

INDICATOR = '''
<div id="{{ indicator_id }}" class="debug-menu">
<a href="#" class="debug-menu-title"><span class="debug-counter {{ color_class }}" onclick="toggleAllErrorPanels(); return false;">Debug ({{ total }})</span></a>
<ul class="debug-submenu">
{% for entry in entries %}
<li id="debug-{{ entry.category }}-toggle"><a href="#" onclick='toggleErrorPanel({{ entry.category|js_string }}); return false;'>{{ entry.label }} ({{ entry.count }})</a></li>
{% endfor %}
</ul>
</div>
'''

PANELS = '''
<div id="{{ container_id }}">
{% for category, events in panels %}
<div class="debug-panel {{ category }}">
{% for event in events %}
<div class="debug-item">
<span class="debug-indicator"></span>
<div class="timestamp">{{ event.timestamp }}</div>
<pre class="message">{{ event.message }}</pre>
<div class="details">File: {{ event.file }}<br>Line: {{ event.line }}<br>Type: {{ event.type }}</div>
</div>
{% endfor %}
</div>
{% endfor %}
</div>
'''
