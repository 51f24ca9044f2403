"""
Configuration file for grammnorm.
"""

# Upper bound on the number of passes any fixpoint loop may make
# before we give up and report non-convergence.
MAX_ITERATIONS = 1_000
# Left recursion removal gives up once the production set has grown
# to this many times its original size.
MAX_GROWTH = 10
PRIME = "′"          # appended to a head name to mint a fresh non-terminal
EPSILON_TEXT = "ε"
END_OF_INPUT = "$"   # kind of the terminal that marks end of input in FOLLOW sets
