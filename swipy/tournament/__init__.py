"""
Single-elimination tournament over a user's favorites.

Contenders are kept in a queue: the first two are paired, the loser is
dropped and the winner goes to the back. ``N`` contenders always take
``N - 1`` choices to produce one winner.
"""
