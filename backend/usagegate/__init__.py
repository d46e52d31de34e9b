"""usagegate — monthly usage rate-limit cache and notification scheduler."""
