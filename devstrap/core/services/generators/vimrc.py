"""
.vimrc generator — a plain vim setup without plugins.
"""

from __future__ import annotations

from devstrap.core.models.template import GeneratedFile

_VIMRC = """\
" Basic settings
set number
set relativenumber
set tabstop=4
set shiftwidth=4
set expandtab
set autoindent
set smartindent
set hlsearch
set incsearch
set ignorecase
set smartcase
set showmatch
set ruler
set showcmd
set wildmenu
set scrolloff=5
set backspace=indent,eol,start

" Enable syntax highlighting
syntax on

" Color scheme
colorscheme desert

" Key mappings
nnoremap <C-n> :nohl<CR>
inoremap jj <Esc>

" Status line
set laststatus=2
set statusline=%F%m%r%h%w[%L][%{&ff}]%y[%p%%][%04l,%04v]
"""


def generate_vimrc() -> GeneratedFile:
    """Generate ~/.vimrc."""
    return GeneratedFile(
        path=".vimrc",
        content=_VIMRC,
        reason="Editor defaults: line numbers, 4-space indent, search highlighting",
    )
