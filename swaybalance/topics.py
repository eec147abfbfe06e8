"""
Event Topics for sway-balance

All pub/sub topics are defined here for easy discovery and documentation.
Topic naming convention: <category>.<action>

Events are published while a balance run drives the compositor, so callers
(the command line, tests, or an embedding script) can follow progress
without the engines knowing who is listening.
"""

# Run lifecycle events
BALANCE_STARTED = "balance.started"
"""Published when a balance run starts. Params: root_id"""

BALANCE_FINISHED = "balance.finished"
"""Published when a balance run completes. Params: report (BalanceReport)"""

# Container events
CONTAINER_SKIPPED = "container.skipped"
"""Published when a container is not balanced because its layout has no
split axis (tabbed, stacked, ...). Params: node_id, layout"""

CONTAINER_BALANCED = "container.balanced"
"""Published after a container's children were reordered and resized.
Params: node_id, result (ResizeResult)"""

# Command events
SWAP_ISSUED = "command.swap"
"""Published after a swap command succeeded. Params: first_id, second_id"""

RESIZE_ISSUED = "command.resize"
"""Published after a resize command was answered.
Params: node_id, command, infeasible"""

# Resize retry events
RESIZE_EXHAUSTED = "resize.exhausted"
"""Published when a container's resize passes ran out before every child
reached its target size. Params: node_id, passes"""
