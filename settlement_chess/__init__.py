"""Settlement Chess: turn-based territory simulation on a chess-piece vocabulary."""
