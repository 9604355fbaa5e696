"""Services subpackage - persistence, history, report rendering and export."""
