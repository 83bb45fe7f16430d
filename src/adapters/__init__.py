"""Transport and display adapters around the streamscope core."""
