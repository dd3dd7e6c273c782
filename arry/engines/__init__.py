"""Template engines: HTML and plain text templates, JSON and XML serialisation."""