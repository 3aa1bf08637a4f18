"""Commands of the gant CLI other than running targets."""
