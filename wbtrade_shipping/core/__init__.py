# Core configuration, database and error handling
