"""Interactive runtime: state, loading, dispatch, and the event loop.

Entry points live in ``gv.runtime.app``; this package stays import-light so
renderers can depend on ``gv.runtime.state`` without pulling in the app.
"""
