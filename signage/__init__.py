# Empty file to make signage a package
