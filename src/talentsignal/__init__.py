"\"\"\"Talent signal aggregation, ranking and monitoring.\"\"\""

__version__ = "0.1.0"
