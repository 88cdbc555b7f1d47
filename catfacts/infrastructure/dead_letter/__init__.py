"""Dead-letter sink for calls that exhausted every retry."""
