from dive import solution


solution.main()
