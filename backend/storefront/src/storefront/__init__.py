"""Order confirmation webhooks: Stripe checkout events to paid orders."""
