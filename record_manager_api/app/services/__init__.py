"""
Service layer abstraction.

Each service encapsulates the data-access logic for one domain and is
constructed with the :class:`~record_manager_api.app.core.db.Database`
handle it should use.  Services hold no state between calls, so a new
instance per request is as good as a shared one.
"""
