"""
Test suite for the shortcut backup tool.

Test Categories:
- Unit tests: filtering, traversal, shortcut naming and archive writing in isolation
- Integration tests: both run modes end to end over real temporary trees
- Edge case tests: unreadable subtrees, unresolvable shortcuts, output failures
"""
