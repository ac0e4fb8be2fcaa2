"""
Rule Mining Module

Partition miners produce one RunResult per partition:
- MiningAdapter: interface for pluggable miners
- MLxtendMiner: Apriori / FP-Growth with iterative support lowering
"""
