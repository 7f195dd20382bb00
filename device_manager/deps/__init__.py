# Marks `device_manager.deps` as a real Python package so imports like
# `from device_manager.deps.devices import get_insert_handler` work reliably.
