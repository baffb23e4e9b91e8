"""
Indexer module talks to an Ethereum node on behalf of the indexer.

+---------------------------------------------+------------------------------+
| Module                                      | Description                  |
+=============================================+==============================+
| :mod:`indexer.abi`                          | Encoding contract calls and  |
|                                             | decoding results             |
+---------------------------------------------+------------------------------+
| :mod:`indexer.client`                       | Node client (blocks,         |
|                                             | transactions, state dumps)   |
+---------------------------------------------+------------------------------+
| :mod:`indexer.erc20_metas`                  | Fetching token metadata      |
|                                             | (code, decimals, supply,     |
|                                             | name)                        |
+---------------------------------------------+------------------------------+
| :mod:`indexer.errors`                       | Exceptions                   |
+---------------------------------------------+------------------------------+

The best way to get started is :class:`indexer.client.EthClient`.
"""
