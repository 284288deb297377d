"""tenantdesk: role hierarchy, tenant permission overrides and plan limits."""
