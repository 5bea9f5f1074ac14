HOOK_STARTUP = 'init'
HOOK_HEAD = 'head'
HOOK_ADMIN_HEAD = 'admin_head'
HOOK_FOOTER = 'footer'
HOOK_ADMIN_FOOTER = 'admin_footer'

# Filter the host consults before drawing the indicator bar
FILTER_SHOW_INDICATOR = 'show_admin_bar'

PRIORITY_DEFAULT = 10
PRIORITY_EARLY = 1

# Element ids the client script and external styling rely on
ID_CONTAINER = 'debug-container'
ID_INDICATOR = 'debug-errors'
