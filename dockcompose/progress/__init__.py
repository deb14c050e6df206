"""Progress events, a spinner and a terminal writer that renders them."""