"""brokerscan: find personal data exposed by data brokers."""
