"""Entry point wrapper for ``python -m markov_chain``.

When the package is executed as a module the code here simply forwards
execution to :func:`markov_chain.main`, so ``python -m markov_chain`` and the
installed ``markov-chain`` console script behave identically.

Example
-------
The following invocation prints five sentences learned from ``corpus.txt``::

    python -m markov_chain corpus.txt --order 2 --count 5
"""

from . import main

if __name__ == "__main__":
    main()
