"""git-smart — repository policy enforcement for git hooks."""
