"""Console entry point for the cljs tool."""
