PIPE = '|>'
REDIRECT = '>>'
REDIRECT_APPEND = '>'
LINEBREAK = '\n'

QUOTE = '"'
LPAREN = '('
RPAREN = ')'
ESCAPE = '\\'
SPACE = ' '

markers = [PIPE, REDIRECT, REDIRECT_APPEND]
redirects = {REDIRECT: False, REDIRECT_APPEND: True}

# evaluate the piped text itself as source, e.g. `echo 1 + 1 |> (*)`
EVAL_PAYLOAD = '*'

# the number of spaces inserted when pressing tab inside a code block
CODE_SPACES = 4
