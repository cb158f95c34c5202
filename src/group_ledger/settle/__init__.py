"""Balance aggregation and settlement netting."""
