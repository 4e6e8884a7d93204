"""
Form Components.

Headless state for what the pages render: the two forms, the tag dropdown,
the outside-click signal and the analytics beacon.
"""
