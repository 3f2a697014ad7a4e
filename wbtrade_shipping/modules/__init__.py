# Domain modules
