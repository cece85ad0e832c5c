"""Qt front end for move-list analysis."""
