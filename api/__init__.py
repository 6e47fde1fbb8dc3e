"""HTTP API for the blackjack engine."""
