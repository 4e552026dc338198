# External integrations
