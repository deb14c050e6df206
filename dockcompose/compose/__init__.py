"""Project stacks, container summaries, restart decisions, log printing and pull/push events."""