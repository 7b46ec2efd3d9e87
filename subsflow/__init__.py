"""SubsFlow — account, session and subscription state manager for a subscription platform demo."""
